import numpy as np


def clamp(value: float, min_value: float, max_value: float) -> float:
    """
    Constrain a value between minimum and maximum bounds.

    Parameters
    ----------
    value : float
        Value to constrain
    min_value : float
        Minimum allowed value
    max_value : float
        Maximum allowed value

    Returns
    -------
    float
        Constrained value between min_value and max_value
    """
    return max(min_value, min(value, max_value))


def num_samples(duration: float, sample_time: float) -> int:
    """
    Number of samples needed to cover (0, duration] at a fixed period.

    The ratio is rounded up, but a duration that is an integer multiple of the
    period (up to floating point noise) yields exactly that multiple.

    Parameters
    ----------
    duration : float
        Length of the interval in seconds
    sample_time : float
        Sampling period in seconds

    Returns
    -------
    int
        ceil(duration / sample_time)
    """
    return int(np.ceil(duration / sample_time - 1e-9))
