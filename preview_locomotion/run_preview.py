import logging
import os
from typing import List, Tuple

import hydra
import numpy as np
from omegaconf import DictConfig

from preview_locomotion.kinematics_dynamics.rbd import LX, LZ
from preview_locomotion.locomotion import (
    PreviewControl,
    PreviewLocomotion,
    PreviewTrajectory,
    WholeBodyState,
)

logger = logging.getLogger(__name__)

TROT_PAIRS = (("lf_foot", "rh_foot"), ("rf_foot", "lh_foot"))


def resolve_model_path(path: str) -> str:
    """URDF path, relative paths being resolved from the package directory"""
    if os.path.isabs(path):
        return path
    return os.path.join(os.path.dirname(__file__), path)


def standing_state(preview: PreviewLocomotion, base_height: float) -> WholeBodyState:
    """Whole-body state of the robot standing still with every foot loaded.

    Parameters
    ----------
    preview : PreviewLocomotion
        Preview controller with a loaded model
    base_height : float
        Height of the base above the ground (m)

    Returns
    -------
    WholeBodyState
        Standing state at the zero joint configuration
    """
    system = preview.system
    dof = system.get_joint_dof()
    full_state = WholeBodyState(joint_pos=np.zeros(dof), joint_vel=np.zeros(dof),
                                joint_acc=np.zeros(dof), joint_eff=np.zeros(dof))
    full_state.base_pos[LZ] = base_height

    system.set_joint_angles(full_state.joint_pos)
    feet = system.get_end_effector_names()
    normal_force = preview.mass * preview.gravity / max(len(feet), 1)
    for name in feet:
        full_state.contact_pos[name] = system.link_data[name].position.copy()
        full_state.contact_vel[name] = np.zeros(3)
        full_state.contact_acc[name] = np.zeros(3)
        wrench = np.zeros(6)
        wrench[LZ] = normal_force
        full_state.contact_eff[name] = wrench
    return full_state


def build_trot_plan(initial_com: np.ndarray, initial_feet: dict, leg_length: float,
                    phase_duration: float, n_phases: int, stride: float) -> List[PreviewControl]:
    """Alternate diagonal swings, moving the CoP forward by half a stride per phase.

    Parameters
    ----------
    initial_com : np.ndarray
        Initial CoM position (world)
    initial_feet : dict
        Initial foot positions w.r.t. the base
    leg_length : float
        Leg length to keep at the end of every phase (m)
    phase_duration : float
        Duration of every phase (s)
    n_phases : int
        Number of phases
    stride : float
        Forward foot displacement of every swing (m)

    Returns
    -------
    List[PreviewControl]
        Phase controls
    """
    plan = []
    for i in range(n_phases):
        swing_feet = TROT_PAIRS[i % 2]
        terminal_cop = np.asarray(initial_com[:2], dtype=float) + np.array([0.5 * stride * (i + 1), 0.0])
        foot_target = {name: initial_feet[name] + np.array([0.5 * stride, 0.0, 0.0])
                       for name in swing_feet if name in initial_feet}
        plan.append(PreviewControl(duration=phase_duration,
                                   terminal_cop=terminal_cop,
                                   terminal_length=leg_length,
                                   foot_target=foot_target))
    return plan


def run_preview(config: DictConfig) -> Tuple[PreviewTrajectory, list]:
    """Load the model, preview a trot and map it back to whole-body states"""
    preview = PreviewLocomotion(config)
    preview.reset_from_urdf_file(resolve_model_path(config.model.urdf))

    full_state = standing_state(preview, base_height=0.6)
    state, system_com = preview.from_whole_body_state(full_state)
    leg_length = float(np.linalg.norm(state.com_pos - state.cop))

    logger.info("Initial CoM %s, CoP %s, support %s", state.com_pos, state.cop, list(state.support_region))

    plan = build_trot_plan(state.com_pos, state.foot_pos, leg_length,
                           config.demo.phase_duration, config.demo.n_phases, config.demo.stride)
    trajectory = preview.multi_phase_preview(state, plan, system_com)
    full_traj = preview.to_whole_body_trajectory(trajectory, system_com)

    final_state = trajectory[-1]
    logger.info("Previewed %d samples over %f s", len(trajectory), final_state.time - state.time)
    logger.info("Final CoM %s, heading %f", final_state.com_pos, final_state.head_pos)
    logger.info("Final base position %s", full_traj[-1].base_pos[LX:LZ + 1])
    return trajectory, full_traj


@hydra.main(version_base=None, config_path=".", config_name="config")
def execute_preview(config: DictConfig):
    trajectory, _ = run_preview(config)

    if config.demo.plot:
        import matplotlib.pyplot as plt

        time = [sample.time for sample in trajectory]
        com = np.array([sample.com_pos for sample in trajectory])
        cop = np.array([sample.cop for sample in trajectory])
        fig, axes = plt.subplots(2, 1, sharex=True)
        axes[0].plot(time, com[:, 0], label='CoM x')
        axes[0].plot(time, cop[:, 0], '--', label='CoP x')
        axes[0].legend()
        axes[1].plot(time, com[:, 2], label='CoM z')
        axes[1].set_xlabel('time (s)')
        axes[1].legend()
        plt.show()


if __name__ == '__main__':
    execute_preview()
