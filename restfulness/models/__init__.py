"""
Inference sub-package.

- `BrainFlowRestfulnessModel`: BrainFlow MLModel, RESTFULNESS metric
"""

from restfulness.models.restfulness_model import BrainFlowRestfulnessModel

__all__ = ["BrainFlowRestfulnessModel"]
