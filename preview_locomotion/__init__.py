from .exceptions import (
    ModelLoadError,
    PreviewLocomotionError,
    PreviewValidationError,
    UnknownEndEffectorError,
)
from .locomotion import (
    MultiPhasePreviewControl,
    PhaseKind,
    PreviewControl,
    PreviewLocomotion,
    PreviewState,
    PreviewTrajectory,
    SLIPModel,
    StepParameters,
    SwingPatternGenerator,
    WholeBodyState,
    WholeBodyTrajectory,
)

__version__ = "0.1.0"

__all__ = [
    'ModelLoadError',
    'MultiPhasePreviewControl',
    'PhaseKind',
    'PreviewControl',
    'PreviewLocomotion',
    'PreviewLocomotionError',
    'PreviewState',
    'PreviewTrajectory',
    'PreviewValidationError',
    'SLIPModel',
    'StepParameters',
    'SwingPatternGenerator',
    'UnknownEndEffectorError',
    'WholeBodyState',
    'WholeBodyTrajectory'
]
