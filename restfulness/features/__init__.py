"""
Feature extraction sub-package.

- `BrainFlowBandPowerExtractor`: DataFilter.get_avg_band_powers (reference)
- `WelchBandPowerExtractor`    : scipy Welch PSD, same bands and filters
"""

from restfulness.features.band_power import (
    BrainFlowBandPowerExtractor,
    WelchBandPowerExtractor,
)

__all__ = [
    "BrainFlowBandPowerExtractor",
    "WelchBandPowerExtractor",
]
