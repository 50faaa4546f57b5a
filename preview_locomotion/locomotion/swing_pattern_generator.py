import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from scipy.interpolate import BPoly

from preview_locomotion.mathematics import clamp

logger = logging.getLogger(__name__)


@dataclass
class StepParameters:
    """Timing and clearance of a single swing.

    Attributes
    ----------
    duration : float
        Swing duration (s)
    step_height : float
        Apex clearance above the highest of the lift-off and touch-down heights (m)
    """
    duration: float = 0.0
    step_height: float = 0.0


class SwingPatternGenerator:
    """Swing-foot trajectory between a lift-off and a touch-down position.

    Horizontal axes follow a quintic polynomial with zero velocity and
    acceleration at both ends. The vertical axis is split at mid-swing: it rises
    from the lift-off height to the apex and then lands on the target, with zero
    velocity at the apex and zero velocity and acceleration at both ends.

    The generator is configured once per swing with `set_parameters` and then
    queried at absolute times with `generate_trajectory`. Times outside the swing
    interval are clamped to it.
    """

    def __init__(self):
        self.initial_time = 0.0
        self.duration = 0.0
        self._splines: List[BPoly] = []
        self._velocity_splines: List[BPoly] = []
        self._acceleration_splines: List[BPoly] = []

    def set_parameters(self, initial_time: float, initial_pos: np.ndarray,
                       target_pos: np.ndarray, params: StepParameters) -> None:
        """Configure the swing.

        Parameters
        ----------
        initial_time : float
            Absolute lift-off time (s)
        initial_pos : np.ndarray
            Lift-off foot position, shape (3,)
        target_pos : np.ndarray
            Touch-down foot position, shape (3,)
        params : StepParameters
            Swing duration and step height
        """
        if params.duration <= 0:
            raise ValueError("Swing duration must be positive")

        self.initial_time = initial_time
        self.duration = params.duration
        initial_pos = np.asarray(initial_pos, dtype=float)
        target_pos = np.asarray(target_pos, dtype=float)

        self._splines = []
        for axis in range(2):
            self._splines.append(BPoly.from_derivatives(
                [0.0, self.duration],
                [[initial_pos[axis], 0.0, 0.0], [target_pos[axis], 0.0, 0.0]]))

        apex = max(initial_pos[2], target_pos[2]) + params.step_height
        self._splines.append(BPoly.from_derivatives(
            [0.0, 0.5 * self.duration, self.duration],
            [[initial_pos[2], 0.0, 0.0], [apex, 0.0], [target_pos[2], 0.0, 0.0]]))

        self._velocity_splines = [spline.derivative() for spline in self._splines]
        self._acceleration_splines = [spline.derivative(2) for spline in self._splines]

        logger.debug("Swing from %s to %s in %f s, apex %f", initial_pos, target_pos,
                     self.duration, apex)

    def generate_trajectory(self, time: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Foot position, velocity and acceleration at an absolute time.

        Parameters
        ----------
        time : float
            Absolute query time (s)

        Returns
        -------
        Tuple[np.ndarray, np.ndarray, np.ndarray]
            Foot position, velocity and acceleration, shape (3,) each
        """
        if not self._splines:
            raise RuntimeError("Swing parameters are not set")

        t = clamp(time - self.initial_time, 0.0, self.duration)
        foot_pos = np.array([float(spline(t)) for spline in self._splines])
        foot_vel = np.array([float(spline(t)) for spline in self._velocity_splines])
        foot_acc = np.array([float(spline(t)) for spline in self._acceleration_splines])
        return foot_pos, foot_vel, foot_acc
