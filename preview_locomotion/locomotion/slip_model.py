"""
Closed-form responses of the reduced dynamic models used by the preview.

Stance phases combine a horizontal Spring-Loaded Inverted Pendulum (SLIP),
linearized about its nominal height, with a vertical spring-mass oscillator.
Flight phases follow the projectile equations of motion. The heading obeys a
constant-acceleration kinematic law.

Every function here is pure: coefficients are computed once per phase from the
boundary conditions and then evaluated at the relative time t in [0, T].
"""
from typing import Tuple

import numpy as np


def slip_coefficients(com_pos: np.ndarray, com_vel: np.ndarray, cop: np.ndarray,
                      terminal_cop: np.ndarray, duration: float,
                      gravity: float, height: float) -> Tuple[float, np.ndarray, np.ndarray, np.ndarray]:
    """Compute the horizontal SLIP response coefficients for one phase.

    The CoP moves linearly during the phase. The coefficients satisfy the initial
    horizontal position and velocity of the CoM.

    Parameters
    ----------
    com_pos, com_vel : np.ndarray
        Initial CoM position and velocity (3D, world frame)
    cop : np.ndarray
        Initial center of pressure (3D, world frame)
    terminal_cop : np.ndarray
        Planned horizontal CoP at the end of the phase, shape (2,)
    duration : float
        Phase duration T (s)
    gravity : float
        Gravity magnitude (m/s^2)
    height : float
        Nominal pendulum height (m)

    Returns
    -------
    Tuple[float, np.ndarray, np.ndarray, np.ndarray]
        Natural frequency omega, beta_1, beta_2 and the CoP displacement
        (initial - terminal), each vector of shape (2,)
    """
    omega = np.sqrt(gravity / height)
    alpha = 2 * omega * duration
    hor_proj = (np.asarray(com_pos) - np.asarray(cop))[:2]
    cop_disp = np.asarray(cop)[:2] - np.asarray(terminal_cop)[:2]
    hor_disp = np.asarray(com_vel)[:2] * duration

    beta_1 = hor_proj / 2 + (hor_disp - cop_disp) / alpha
    beta_2 = hor_proj / 2 - (hor_disp - cop_disp) / alpha
    return omega, beta_1, beta_2, cop_disp


def slip_horizontal(t: float, omega: float, beta_1: np.ndarray, beta_2: np.ndarray,
                    cop_disp: np.ndarray, duration: float,
                    cop_xy: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Evaluate the horizontal SLIP response at relative time t.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        Horizontal CoM position, velocity and acceleration, shape (2,) each
    """
    e_pos = np.exp(omega * t)
    e_neg = np.exp(-omega * t)
    pos = beta_1 * e_pos + beta_2 * e_neg + (cop_disp / duration) * t + np.asarray(cop_xy)[:2]
    vel = beta_1 * omega * e_pos - beta_2 * omega * e_neg + cop_disp / duration
    acc = beta_1 * omega**2 * e_pos + beta_2 * omega**2 * e_neg
    return pos, vel, acc


def spring_mass_coefficients(com_pos: np.ndarray, com_vel: np.ndarray, cop: np.ndarray,
                             terminal_length: float, duration: float,
                             gravity: float, stiffness: float,
                             mass: float) -> Tuple[float, float, float, float, float]:
    """Compute the vertical spring-mass response coefficients for one phase.

    Returns
    -------
    Tuple[float, float, float, float, float]
        Spring frequency omega_s, d_1, d_2, initial leg length L0 and the leg
        length change delta_length
    """
    initial_length = float(np.linalg.norm(np.asarray(com_pos) - np.asarray(cop)))

    spring_omega = np.sqrt(stiffness / mass)
    delta_length = terminal_length - initial_length
    d_1 = com_pos[2] - initial_length + gravity / spring_omega**2
    d_2 = com_vel[2] / spring_omega - delta_length / (spring_omega * duration)
    return spring_omega, d_1, d_2, initial_length, delta_length


def spring_mass_vertical(t: float, spring_omega: float, d_1: float, d_2: float,
                         initial_length: float, delta_length: float, duration: float,
                         gravity: float) -> Tuple[float, float, float]:
    """Evaluate the vertical spring-mass response at relative time t.

    Returns
    -------
    Tuple[float, float, float]
        Vertical CoM position, velocity and acceleration
    """
    c = np.cos(spring_omega * t)
    s = np.sin(spring_omega * t)
    pos = d_1 * c + d_2 * s + (delta_length / duration) * t + \
        initial_length - gravity / spring_omega**2
    vel = -d_1 * spring_omega * s + d_2 * spring_omega * c + delta_length / duration
    acc = -d_1 * spring_omega**2 * c - d_2 * spring_omega**2 * s
    return float(pos), float(vel), float(acc)


def projectile(t: float, com_pos: np.ndarray, com_vel: np.ndarray,
               gravity: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Ballistic CoM motion under gravity along -Z.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        CoM position, velocity and acceleration (3D)
    """
    gravity_vec = np.array([0.0, 0.0, -gravity])
    pos = np.asarray(com_pos) + np.asarray(com_vel) * t + 0.5 * gravity_vec * t**2
    vel = np.asarray(com_vel) + gravity_vec * t
    return pos, vel, gravity_vec


def heading_kinematics(t: float, head_pos: float, head_vel: float,
                       head_acc: float) -> Tuple[float, float, float]:
    """Heading under constant angular acceleration."""
    return (head_pos + head_vel * t + 0.5 * head_acc * t**2,
            head_vel + head_acc * t,
            head_acc)
