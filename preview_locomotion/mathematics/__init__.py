from .linear_algebra import (
    calc_hatto,
    calc_rodrigues,
    get_rotation_x,
    get_rotation_y,
    get_rotation_z,
    get_rotation_rpy,
)

from .utils import (
    clamp,
    num_samples
)

__all__ = [
    'calc_hatto',
    'calc_rodrigues',
    'get_rotation_x',
    'get_rotation_y',
    'get_rotation_z',
    'get_rotation_rpy',
    'clamp',
    'num_samples'
]
