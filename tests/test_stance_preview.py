import numpy as np
import pytest

from preview_locomotion import (
    ModelLoadError,
    PreviewControl,
    PreviewLocomotion,
    PreviewState,
    PreviewValidationError,
    SLIPModel,
)


def test_concrete_scenario(preview):
    state = PreviewState(com_pos=np.array([0.0, 0.0, 0.6]), cop=np.zeros(3))
    control = PreviewControl(duration=0.5, terminal_cop=np.array([0.1, 0.0]), terminal_length=0.6)

    trajectory = preview.stance_preview(state, control)

    assert preview.mass == pytest.approx(10.0)
    assert len(trajectory) == 50
    final_state = trajectory[-1]
    assert final_state.time == pytest.approx(0.5)

    omega = np.sqrt(9.81 / 0.6)
    beta = 0.1 / (2 * omega * 0.5)
    expected_x = beta * (np.exp(omega * 0.5) - np.exp(-omega * 0.5)) - 0.1
    assert final_state.com_pos[0] == pytest.approx(expected_x)
    assert 0.05 < final_state.com_pos[0] < 0.1
    assert final_state.com_pos[1] == pytest.approx(0.0)
    assert final_state.com_pos[2] == pytest.approx(0.0981 * np.cos(5.0) + 0.6 - 0.0981)
    assert abs(final_state.com_pos[2] - 0.6) < 0.1

    xs = [sample.com_pos[0] for sample in trajectory]
    assert all(b > a for a, b in zip(xs, xs[1:]))


@pytest.mark.parametrize("k", [1, 7, 30, 50])
def test_sample_count_and_timing(preview, k):
    state = PreviewState(time=2.0, com_pos=np.array([0.0, 0.0, 0.6]))
    control = PreviewControl(duration=k * preview.sample_time, terminal_length=0.6)

    trajectory = preview.stance_preview(state, control)

    assert len(trajectory) == k
    times = [sample.time for sample in trajectory]
    assert times[0] == pytest.approx(2.0 + preview.sample_time)
    np.testing.assert_allclose(np.diff(times), preview.sample_time, atol=1e-12)
    assert times[-1] == pytest.approx(2.0 + control.duration)


def test_duration_not_multiple_of_sample_time(preview):
    state = PreviewState(com_pos=np.array([0.0, 0.0, 0.6]))
    control = PreviewControl(duration=0.105, terminal_length=0.6)

    trajectory = preview.stance_preview(state, control)

    assert len(trajectory) == 11
    assert trajectory[-1].time == pytest.approx(0.105)
    assert trajectory[-2].time == pytest.approx(0.10)


def test_static_horizontal_com_without_cop_displacement(preview):
    state = PreviewState(com_pos=np.array([0.1, -0.05, 0.6]), cop=np.array([0.1, -0.05, 0.0]))
    control = PreviewControl(duration=0.4, terminal_cop=np.array([0.1, -0.05]), terminal_length=0.6)

    trajectory = preview.stance_preview(state, control)

    for sample in trajectory:
        np.testing.assert_allclose(sample.com_pos[:2], [0.1, -0.05], atol=1e-12)
        np.testing.assert_allclose(sample.com_vel[:2], 0.0, atol=1e-12)
        np.testing.assert_allclose(sample.com_acc[:2], 0.0, atol=1e-12)


def test_horizontal_velocity_and_acceleration_are_separate(preview):
    state = PreviewState(com_pos=np.array([0.0, 0.0, 0.6]), com_vel=np.array([0.2, 0.0, 0.0]))
    control = PreviewControl(duration=0.3, terminal_cop=np.array([0.05, 0.0]), terminal_length=0.6)

    trajectory = preview.stance_preview(state, control)

    dt = preview.sample_time
    finite_vel = (trajectory[11].com_pos[0] - trajectory[9].com_pos[0]) / (2 * dt)
    assert trajectory[10].com_vel[0] == pytest.approx(finite_vel, rel=1e-3)
    assert trajectory[10].com_vel[0] != pytest.approx(trajectory[10].com_acc[0])


def test_heading_and_cop(preview):
    state = PreviewState(com_pos=np.array([0.0, 0.0, 0.6]), head_pos=0.1, head_vel=0.2)
    control = PreviewControl(duration=0.2, terminal_cop=np.array([0.04, 0.02]), terminal_length=0.6,
                             head_acc=1.0)

    trajectory = preview.stance_preview(state, control)

    final_state = trajectory[-1]
    assert final_state.head_pos == pytest.approx(0.1 + 0.2 * 0.2 + 0.5 * 0.04)
    assert final_state.head_vel == pytest.approx(0.4)
    assert final_state.head_acc == pytest.approx(1.0)
    np.testing.assert_allclose(final_state.cop[:2], [0.04, 0.02])
    np.testing.assert_allclose(trajectory[9].cop[:2], [0.02, 0.01])


def test_stance_preview_rejects_non_positive_duration(preview):
    state = PreviewState(com_pos=np.array([0.0, 0.0, 0.6]))

    with pytest.raises(PreviewValidationError):
        preview.stance_preview(state, PreviewControl(duration=0.0, terminal_length=0.6))
    with pytest.raises(ValueError):
        preview.stance_preview(state, PreviewControl(duration=-0.1, terminal_length=0.6))


def test_stance_preview_requires_a_model(config):
    controller = PreviewLocomotion(config)
    state = PreviewState(com_pos=np.array([0.0, 0.0, 0.6]))

    with pytest.raises(ModelLoadError):
        controller.stance_preview(state, PreviewControl(duration=0.1, terminal_length=0.6))


def test_set_model_validates_parameters(preview):
    with pytest.raises(PreviewValidationError):
        preview.set_model(SLIPModel(height=0.0, stiffness=100.0))
    with pytest.raises(PreviewValidationError):
        preview.set_sample_time(0.0)

    preview.set_model(SLIPModel(height=0.5, stiffness=500.0))
    assert preview.slip.height == 0.5


def test_defaults_without_configuration(caplog):
    with caplog.at_level('WARNING'):
        controller = PreviewLocomotion()

    assert "Missing 'preview_locomotion' section" in caplog.text
    assert controller.sample_time == pytest.approx(0.001)
    assert controller.gravity == pytest.approx(9.81)
    assert controller.mass == 0.0


def test_step_height_and_force_threshold_setters(preview):
    preview.set_step_height(0.05)
    preview.set_force_threshold(30.0)

    assert preview.step_height == 0.05
    assert preview.force_threshold == 30.0
