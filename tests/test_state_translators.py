import numpy as np
import pytest

from preview_locomotion.kinematics_dynamics.rbd import AZ, LX, LZ

from conftest import FEET, make_standing_state


def test_standing_robot_to_preview_state(preview):
    full_state = make_standing_state(preview)

    state, system_com = preview.from_whole_body_state(full_state)

    assert state.time == pytest.approx(0.5)
    np.testing.assert_allclose(system_com, [0.0, 0.0, -0.12], atol=1e-12)
    np.testing.assert_allclose(state.com_pos, [0.0, 0.0, 0.48], atol=1e-12)
    np.testing.assert_allclose(state.cop, [0.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(state.com_vel, 0.0, atol=1e-12)
    assert set(state.support_region) == set(FEET)
    np.testing.assert_allclose(state.foot_pos["lf_foot"], [0.3, 0.2, -0.6], atol=1e-12)


def test_unloaded_feet_are_not_in_the_support_region(preview):
    full_state = make_standing_state(preview, loaded_feet=("lf_foot", "rh_foot"))
    full_state.contact_eff["rf_foot"][LZ] = 2.0

    state, _ = preview.from_whole_body_state(full_state)

    assert set(state.support_region) == {"lf_foot", "rh_foot"}
    # Every foot pushing on the ground shifts the CoP, active or not
    np.testing.assert_allclose(state.cop, [0.6 / 51.05, -0.4 / 51.05, 0.0], atol=1e-12)
    assert set(state.foot_pos) == set(FEET)


def test_cop_follows_the_load_distribution(preview):
    full_state = make_standing_state(preview, loaded_feet=("lf_foot", "rf_foot"), normal_force=10.0)

    state, _ = preview.from_whole_body_state(full_state)

    np.testing.assert_allclose(state.cop, [0.3, 0.0, 0.0], atol=1e-12)


def test_round_trip_with_heading_and_bent_legs(preview):
    joint_pos = np.array([0.2, -0.4] * 4)
    full_state = make_standing_state(preview, base_pos=[0.0, 0.0, 0.4, 0.1, -0.2, 0.55], joint_pos=joint_pos)

    state, system_com = preview.from_whole_body_state(full_state)
    restored = preview.to_whole_body_state(state, system_com)

    np.testing.assert_allclose(restored.base_pos[LX:LZ + 1], [0.1, -0.2, 0.55], atol=1e-12)
    assert restored.base_pos[AZ] == pytest.approx(0.4)
    assert restored.time == pytest.approx(full_state.time)
    for name in FEET:
        np.testing.assert_allclose(restored.contact_pos[name], full_state.contact_pos[name])
    assert restored.joint_pos.shape == (8,)


def test_round_trip_of_base_velocity(preview):
    full_state = make_standing_state(preview)
    full_state.base_vel[LX:LZ + 1] = [0.3, -0.1, 0.05]
    full_state.base_acc[LX:LZ + 1] = [1.0, 0.0, -0.5]
    full_state.base_pos[AZ] = 0.2
    full_state.base_vel[AZ] = 0.0
    full_state.base_acc[AZ] = 0.7

    state, system_com = preview.from_whole_body_state(full_state)
    restored = preview.to_whole_body_state(state, system_com)

    np.testing.assert_allclose(state.com_vel, [0.3, -0.1, 0.05], atol=1e-12)
    np.testing.assert_allclose(restored.base_vel[LX:LZ + 1], [0.3, -0.1, 0.05], atol=1e-12)
    np.testing.assert_allclose(restored.base_acc[LX:LZ + 1], [1.0, 0.0, -0.5])
    assert restored.base_acc[AZ] == pytest.approx(0.7)
    assert state.head_acc == pytest.approx(0.7)


def test_heading_rate_is_carried(preview):
    full_state = make_standing_state(preview)
    full_state.base_vel[AZ] = 0.8

    state, _ = preview.from_whole_body_state(full_state)

    assert state.head_vel == pytest.approx(0.8)
    # The CoM offset lies on the yaw axis
    np.testing.assert_allclose(state.com_vel, 0.0, atol=1e-12)


def test_trajectory_translation_preserves_order(preview):
    full_traj = [make_standing_state(preview, base_pos=[0.0, 0.0, 0.0, 0.01 * k, 0.0, 0.6]) for k in range(5)]
    for k, full_state in enumerate(full_traj):
        full_state.time = 0.1 * k

    preview_traj, system_coms = preview.from_whole_body_trajectory(full_traj)
    restored = preview.to_whole_body_trajectory(preview_traj, system_coms[0])

    assert len(preview_traj) == len(system_coms) == len(restored) == 5
    assert [s.time for s in preview_traj] == pytest.approx([0.0, 0.1, 0.2, 0.3, 0.4])
    for k, full_state in enumerate(restored):
        np.testing.assert_allclose(full_state.base_pos[LX:LZ + 1], [0.01 * k, 0.0, 0.6], atol=1e-12)


def test_round_trip_keeps_roll_pitch_and_joints(preview):
    joint_pos = np.array([0.2, -0.4, 0.1, -0.3, -0.2, 0.5, 0.0, 0.3])
    full_state = make_standing_state(preview, base_pos=[0.05, -0.03, 0.4, 0.1, -0.2, 0.55], joint_pos=joint_pos)
    full_state.base_vel = np.array([0.3, -0.2, 0.5, 0.2, 0.1, -0.05])
    full_state.base_acc = np.array([0.1, 0.2, -0.3, 0.4, 0.0, -0.1])
    full_state.joint_vel = np.array([0.5, -1.0, 0.2, 0.3, -0.4, 0.1, 0.0, 0.8])
    full_state.joint_eff = np.linspace(-2.0, 2.0, 8)

    state, system_com = preview.from_whole_body_state(full_state)
    restored = preview.to_whole_body_state(state, system_com, full_state)

    np.testing.assert_allclose(restored.base_pos, full_state.base_pos, atol=1e-12)
    np.testing.assert_allclose(restored.base_vel, full_state.base_vel, atol=1e-12)
    np.testing.assert_allclose(restored.base_acc, full_state.base_acc, atol=1e-12)
    np.testing.assert_allclose(restored.joint_pos, joint_pos)
    np.testing.assert_allclose(restored.joint_vel, full_state.joint_vel)
    np.testing.assert_allclose(restored.joint_eff, full_state.joint_eff)
    for name in FEET:
        np.testing.assert_allclose(restored.contact_pos[name], full_state.contact_pos[name])
        np.testing.assert_allclose(restored.contact_eff[name], full_state.contact_eff[name])

    # The given state is not modified
    assert restored is not full_state
    restored.base_pos[0] = 1.0
    assert full_state.base_pos[0] == pytest.approx(0.05)


def test_yaw_rate_is_removed_from_the_base_velocity(preview):
    full_state = make_standing_state(preview, joint_pos=np.array([0.4, 0.0] * 4))
    full_state.base_vel[AZ] = 0.8
    full_state.base_vel[LX] = 0.2

    state, system_com = preview.from_whole_body_state(full_state)
    restored = preview.to_whole_body_state(state, system_com)

    # The CoM sits behind the base, so the yaw rate moves it sideways
    assert abs(state.com_vel[1]) > 1e-3
    np.testing.assert_allclose(restored.base_vel, full_state.base_vel, atol=1e-12)


def test_trajectory_translation_with_a_whole_body_state(preview):
    full_state = make_standing_state(preview, base_pos=[0.02, 0.01, 0.0, 0.0, 0.0, 0.6],
                                     joint_pos=np.array([0.1, -0.2] * 4))
    state, system_com = preview.from_whole_body_state(full_state)

    restored = preview.to_whole_body_trajectory([state, state], system_com, full_state)

    assert len(restored) == 2
    for restored_state in restored:
        np.testing.assert_allclose(restored_state.base_pos, full_state.base_pos, atol=1e-12)
        np.testing.assert_allclose(restored_state.joint_pos, full_state.joint_pos)
