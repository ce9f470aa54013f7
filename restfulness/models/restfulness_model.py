"""
BrainFlow restfulness classifier.

Wraps BrainFlow's MLModel configured for the RESTFULNESS metric with
the default classifier. The model consumes the mean band-power vector
and returns a one-element array holding a score in [0, 1]; higher
means more restful.
"""

import logging

import numpy as np
from brainflow.exit_codes import BrainFlowError
from brainflow.ml_model import (
    BrainFlowClassifiers,
    BrainFlowMetrics,
    BrainFlowModelParams,
    MLModel,
)

from restfulness.errors import DeviceError
from restfulness.ports import InferenceService

logger = logging.getLogger(__name__)


class BrainFlowRestfulnessModel(InferenceService):
    """Pretrained restfulness classifier shipped with BrainFlow."""

    def __init__(
        self,
        metric: BrainFlowMetrics = BrainFlowMetrics.RESTFULNESS,
        classifier: BrainFlowClassifiers = BrainFlowClassifiers.DEFAULT_CLASSIFIER,
    ) -> None:
        self._params = BrainFlowModelParams(metric.value, classifier.value)
        self._model: MLModel | None = None

    @property
    def is_prepared(self) -> bool:
        return self._model is not None

    def prepare(self) -> None:
        try:
            model = MLModel(self._params)
            model.prepare()
        except BrainFlowError as exc:
            raise DeviceError("prepare model", str(exc)) from exc
        self._model = model
        logger.info("Restfulness classifier prepared.")

    def predict(self, features: np.ndarray) -> np.ndarray:
        if self._model is None:
            raise DeviceError("predict", "model not prepared")
        try:
            return np.asarray(self._model.predict(np.asarray(features, dtype=np.float64)))
        except BrainFlowError as exc:
            raise DeviceError("predict", str(exc)) from exc

    def release(self) -> None:
        if self._model is None:
            return
        try:
            self._model.release()
        except BrainFlowError as exc:
            raise DeviceError("release model", str(exc)) from exc
        finally:
            self._model = None
