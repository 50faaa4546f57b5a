from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

import numpy as np

from preview_locomotion.kinematics_dynamics.rbd import AX, AY, AZ, LX, LY, LZ, X, Y, Z  # noqa: F401


def _zeros3() -> np.ndarray:
    return np.zeros(3)


def _zeros6() -> np.ndarray:
    return np.zeros(6)


class PhaseKind(Enum):
    """Dynamic model used to preview a phase.

    - STANCE (0): at least one foot on the ground, SLIP + spring-mass model
    - FLIGHT (1): no ground contact, projectile model
    """
    STANCE = 0
    FLIGHT = 1


@dataclass
class SLIPModel:
    """Spring-Loaded Inverted Pendulum parameters.

    Attributes
    ----------
    height : float
        Nominal pendulum length (m), sets the horizontal natural frequency
    stiffness : float
        Leg stiffness (N/m), sets the vertical spring-mass frequency
    """
    height: float = 0.0
    stiffness: float = 0.0


@dataclass
class PreviewState:
    """Reduced state of the robot at one instant.

    CoM, CoP and heading quantities are expressed in the world frame. Foot
    quantities are translations with respect to the base and are keyed by
    end-effector name. The support region only holds the feet in active contact.
    """
    time: float = 0.0
    com_pos: np.ndarray = field(default_factory=_zeros3)
    com_vel: np.ndarray = field(default_factory=_zeros3)
    com_acc: np.ndarray = field(default_factory=_zeros3)
    head_pos: float = 0.0
    head_vel: float = 0.0
    head_acc: float = 0.0
    cop: np.ndarray = field(default_factory=_zeros3)
    foot_pos: Dict[str, np.ndarray] = field(default_factory=dict)
    foot_vel: Dict[str, np.ndarray] = field(default_factory=dict)
    foot_acc: Dict[str, np.ndarray] = field(default_factory=dict)
    support_region: Dict[str, np.ndarray] = field(default_factory=dict)


@dataclass
class PreviewControl:
    """Control decision of a single phase.

    Attributes
    ----------
    duration : float
        Phase duration (s), must be positive
    terminal_cop : np.ndarray
        Planned horizontal CoP at the end of the phase, shape (2,)
    terminal_length : float
        Planned leg length at the end of the phase (m)
    head_acc : float
        Constant heading acceleration during the phase (rad/s^2)
    foot_target : Dict[str, np.ndarray]
        Landing position of every foot that swings in this phase. Feet without
        an entry stay where they are.
    phase : PhaseKind
        Dynamic model used for this phase
    """
    duration: float = 0.0
    terminal_cop: np.ndarray = field(default_factory=lambda: np.zeros(2))
    terminal_length: float = 0.0
    head_acc: float = 0.0
    foot_target: Dict[str, np.ndarray] = field(default_factory=dict)
    phase: PhaseKind = PhaseKind.STANCE


@dataclass
class WholeBodyState:
    """Full state of the floating-base robot.

    Base vectors are 6D, ordered [AX, AY, AZ, LX, LY, LZ]. Contact positions,
    velocities and accelerations are expressed in the base frame; contact
    efforts are 6D wrenches ordered like the base vectors.
    """
    time: float = 0.0
    base_pos: np.ndarray = field(default_factory=_zeros6)
    base_vel: np.ndarray = field(default_factory=_zeros6)
    base_acc: np.ndarray = field(default_factory=_zeros6)
    joint_pos: np.ndarray = field(default_factory=lambda: np.zeros(0))
    joint_vel: np.ndarray = field(default_factory=lambda: np.zeros(0))
    joint_acc: np.ndarray = field(default_factory=lambda: np.zeros(0))
    joint_eff: np.ndarray = field(default_factory=lambda: np.zeros(0))
    contact_pos: Dict[str, np.ndarray] = field(default_factory=dict)
    contact_vel: Dict[str, np.ndarray] = field(default_factory=dict)
    contact_acc: Dict[str, np.ndarray] = field(default_factory=dict)
    contact_eff: Dict[str, np.ndarray] = field(default_factory=dict)


PreviewTrajectory = List[PreviewState]
MultiPhasePreviewControl = List[PreviewControl]
WholeBodyTrajectory = List[WholeBodyState]
