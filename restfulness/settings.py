"""
Deployment settings.

Loads settings from environment variables (prefix ``RESTFULNESS_``)
and an optional .env file. Tuned constants live in
restfulness.config; this module only holds what changes between
machines and headsets.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        dev_logging: Route BrainFlow board/ML logs to timestamped files.
        log_dir: Folder for the BrainFlow developer log files.
        board_id: BrainFlow board, as a BoardIds name or integer id.
        prediction_interval_ms: Milliseconds between two predictions.
        apply_filters: Run the notch/band-pass chain before band powers.
        max_consecutive_failures: Failed ticks in a row before escalating.
        tick_history_size: Number of tick results kept for status output.

    The remaining fields map one-to-one to BrainFlowInputParams and are
    only needed for boards that are not discovered automatically.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESTFULNESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    dev_logging: bool = False
    log_dir: str = "log"

    board_id: str = "SYNTHETIC_BOARD"
    prediction_interval_ms: int = 2500
    apply_filters: bool = True
    max_consecutive_failures: int = 5
    tick_history_size: int = 200

    # BrainFlowInputParams
    serial_port: str = ""
    mac_address: str = ""
    ip_address: str = ""
    ip_port: int = 0
    timeout: int = 0
    serial_number: str = ""
    file: str = ""
    other_info: str = ""


settings = Settings()
