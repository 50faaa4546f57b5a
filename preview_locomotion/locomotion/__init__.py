from .preview_types import (
    MultiPhasePreviewControl,
    PhaseKind,
    PreviewControl,
    PreviewState,
    PreviewTrajectory,
    SLIPModel,
    WholeBodyState,
    WholeBodyTrajectory,
)
from .swing_pattern_generator import StepParameters, SwingPatternGenerator
from .preview_locomotion import PreviewLocomotion

__all__ = [
    'MultiPhasePreviewControl',
    'PhaseKind',
    'PreviewControl',
    'PreviewLocomotion',
    'PreviewState',
    'PreviewTrajectory',
    'SLIPModel',
    'StepParameters',
    'SwingPatternGenerator',
    'WholeBodyState',
    'WholeBodyTrajectory'
]
