import os

import numpy as np
import pytest
from omegaconf import OmegaConf

from preview_locomotion.kinematics_dynamics.rbd import LZ
from preview_locomotion.locomotion import PreviewLocomotion, PreviewState, WholeBodyState

PACKAGE_DIR = os.path.join(os.path.dirname(__file__), '..', 'preview_locomotion')
URDF_PATH = os.path.join(PACKAGE_DIR, 'models', 'quadruped.urdf')

FEET = ("lf_foot", "rf_foot", "lh_foot", "rh_foot")


@pytest.fixture
def config():
    return OmegaConf.create({
        'preview_locomotion': {
            'sample_time': 0.01,
            'step_height': 0.1,
            'force_threshold': 5.0,
            'gravity': 9.81,
            'slip': {'height': 0.6, 'stiffness': 1000.0},
        }
    })


@pytest.fixture
def preview(config):
    controller = PreviewLocomotion(config)
    controller.reset_from_urdf_file(URDF_PATH)
    return controller


@pytest.fixture
def initial_state():
    """CoM 0.6 m above the CoP, at rest, every foot under its hip"""
    state = PreviewState(time=1.0)
    state.com_pos = np.array([0.0, 0.0, 0.6])
    state.cop = np.zeros(3)
    for name, (x, y) in zip(FEET, ((0.3, 0.2), (0.3, -0.2), (-0.3, 0.2), (-0.3, -0.2))):
        state.foot_pos[name] = np.array([x, y, -0.6])
        state.foot_vel[name] = np.zeros(3)
        state.foot_acc[name] = np.zeros(3)
        state.support_region[name] = state.foot_pos[name].copy()
    return state


def make_standing_state(preview, base_pos=None, joint_pos=None, loaded_feet=FEET, normal_force=24.525):
    """Whole-body state with the given feet loaded"""
    dof = preview.system.get_joint_dof()
    full_state = WholeBodyState(time=0.5,
                                joint_pos=np.zeros(dof) if joint_pos is None else np.asarray(joint_pos, dtype=float),
                                joint_vel=np.zeros(dof), joint_acc=np.zeros(dof), joint_eff=np.zeros(dof))
    if base_pos is not None:
        full_state.base_pos = np.asarray(base_pos, dtype=float)
    else:
        full_state.base_pos[LZ] = 0.6

    preview.system.set_joint_angles(full_state.joint_pos)
    for name in FEET:
        full_state.contact_pos[name] = preview.system.link_data[name].position.copy()
        full_state.contact_vel[name] = np.zeros(3)
        full_state.contact_acc[name] = np.zeros(3)
        wrench = np.zeros(6)
        if name in loaded_feet:
            wrench[LZ] = normal_force
        full_state.contact_eff[name] = wrench
    return full_state
