class PreviewLocomotionError(Exception):
    """Base class for all errors raised by the preview controller."""


class ModelLoadError(PreviewLocomotionError, IOError):
    """The robot description could not be read or parsed, or no model is loaded."""


class PreviewValidationError(PreviewLocomotionError, ValueError):
    """A control sequence or a model parameter is malformed."""


class UnknownEndEffectorError(PreviewLocomotionError, KeyError):
    """A foot referenced by a control is not tracked by the robot model."""
