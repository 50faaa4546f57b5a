"""
Preview of the reduced-order locomotion dynamics of a legged robot.

Given the current reduced state of the robot (CoM, heading, feet) and a plan of
phases, the preview predicts the CoM, heading and foot trajectories using
closed-form models:
- stance phases: horizontal Spring-Loaded Inverted Pendulum (SLIP) coupled with
  a vertical spring-mass system
- flight phases: projectile motion
- swing feet: swing pattern generator, planted feet: fixed to the ground

Reference: Mastalli, Carlos et al. "Hierarchical planning of dynamic movements
without scheduled contact sequences." ICRA 2016.
"""
import copy
import logging
from typing import List, Optional, Tuple

import numpy as np
from omegaconf import DictConfig

from preview_locomotion.exceptions import (
    ModelLoadError,
    PreviewValidationError,
    UnknownEndEffectorError,
)
from preview_locomotion.kinematics_dynamics import FloatingBaseSystem, WrenchDynamics
from preview_locomotion.mathematics import clamp, get_rotation_rpy, num_samples

from .preview_types import (
    AX, AZ, LX, LZ, Z,
    MultiPhasePreviewControl,
    PhaseKind,
    PreviewControl,
    PreviewState,
    PreviewTrajectory,
    SLIPModel,
    WholeBodyState,
    WholeBodyTrajectory,
)
from .slip_model import (
    heading_kinematics,
    projectile,
    slip_coefficients,
    slip_horizontal,
    spring_mass_coefficients,
    spring_mass_vertical,
)
from .swing_pattern_generator import StepParameters, SwingPatternGenerator

logger = logging.getLogger(__name__)


class PreviewLocomotion():
    """Reduced-order preview controller for legged locomotion.

    The controller owns the model parameters (sample time, gravity, total mass,
    force threshold, SLIP model and step height) and the rigid-body and dynamics
    models built once from the robot description. Preview calls are pure: they
    read the given state and control and return new trajectories.

    The offset between the system CoM and the base frame is never cached between
    calls. `from_whole_body_state` returns it next to the preview state, and the
    preview and translation methods accept it explicitly. When it is omitted the
    floating-base CoM of the model is used.

    Parameters
    ----------
    config : DictConfig, optional
        Configuration parameters from config.yaml
    swing_generator : optional
        Swing pattern generator exposing `set_parameters` and
        `generate_trajectory`, by default a `SwingPatternGenerator`
    """

    def __init__(self, config: Optional[DictConfig] = None, swing_generator=None):
        if config is None or 'preview_locomotion' not in config:
            logger.warning("Missing 'preview_locomotion' section in configuration, using defaults")
            preview_config = {}
        else:
            preview_config = config.preview_locomotion

        self.sample_time = preview_config.get('sample_time', 0.001)  # Sampling time (seconds)
        self.step_height = preview_config.get('step_height', 0.1)  # Swing apex clearance (meters)
        self.force_threshold = preview_config.get('force_threshold', 0.0)  # Active contact force (N)

        slip_config = preview_config.get('slip', {})
        self.slip = SLIPModel(height=slip_config.get('height', 0.0),
                              stiffness=slip_config.get('stiffness', 0.0))

        end_effectors = preview_config.get('end_effectors', None)
        self._end_effectors = list(end_effectors) if end_effectors else None

        # Rigid-body and dynamics models
        self.system = FloatingBaseSystem()
        self.system.gravity = preview_config.get('gravity', self.system.gravity)
        self.dynamics = WrenchDynamics()
        self.foot_pattern_generator = swing_generator if swing_generator is not None \
            else SwingPatternGenerator()

        self.gravity = self.system.gravity
        self.mass = 0.0
        self.floating_base_com = np.zeros(3)

    def reset_from_urdf_file(self, filename: str) -> None:
        """Load the robot model from a URDF file.

        Parameters
        ----------
        filename : str
            Path of the URDF file

        Raises
        ------
        ModelLoadError
            If the file cannot be read or its content is not a valid model
        """
        try:
            with open(filename, 'r') as model_file:
                model_xml = model_file.read()
        except OSError as err:
            logger.error("Error opening file '%s': %s", filename, err)
            raise ModelLoadError(f"Error opening file '{filename}'") from err

        self.reset_from_urdf_model(model_xml)

    def reset_from_urdf_model(self, urdf_model: str) -> None:
        """Load the robot model from URDF text.

        Parameters
        ----------
        urdf_model : str
            URDF description
        """
        self.system.reset_from_urdf_model(urdf_model)
        if self._end_effectors is not None:
            self.system.set_end_effector_names(self._end_effectors)

        self.gravity = self.system.gravity
        self.mass = self.system.get_total_mass()
        self.floating_base_com = self.system.get_floating_base_com()

        logger.info("Preview model reset: mass %f kg, gravity %f m/s^2, floating-base CoM %s",
                    self.mass, self.gravity, self.floating_base_com)

    def set_sample_time(self, sample_time: float) -> None:
        """Set the preview sampling time (s), must be positive"""
        if sample_time <= 0:
            logger.error("Invalid sample time %f", sample_time)
            raise PreviewValidationError("Sample time must be positive")
        self.sample_time = sample_time

    def set_model(self, model: SLIPModel) -> None:
        """Set the SLIP model used by the stance phases.

        Parameters
        ----------
        model : SLIPModel
            Pendulum height and leg stiffness, both positive

        Raises
        ------
        PreviewValidationError
            If the height or the stiffness is not positive
        """
        if model.height <= 0 or model.stiffness <= 0:
            logger.error("Invalid SLIP model: height %f, stiffness %f", model.height, model.stiffness)
            raise PreviewValidationError("SLIP height and stiffness must be positive")
        self.slip = model

    def set_step_height(self, step_height: float) -> None:
        """Set the swing apex clearance (m)"""
        self.step_height = step_height

    def set_force_threshold(self, force_threshold: float) -> None:
        """Set the normal force (N) above which a contact is active"""
        self.force_threshold = force_threshold

    def multi_phase_preview(self, state: PreviewState, control: MultiPhasePreviewControl,
                            system_com: Optional[np.ndarray] = None) -> PreviewTrajectory:
        """Preview a sequence of phases.

        Each phase starts from the last sample of the previous one (the given
        state for the first phase). The phase samples are concatenated in order,
        without repeating the phase boundaries.

        Parameters
        ----------
        state : PreviewState
            Initial reduced state
        control : MultiPhasePreviewControl
            Ordered phase controls
        system_com : np.ndarray, optional
            System CoM w.r.t. the base frame, see `from_whole_body_state`

        Returns
        -------
        PreviewTrajectory
            Samples of all the phases
        """
        if len(control) == 0:
            logger.error("Multi-phase preview requested without phases")
            raise PreviewValidationError("The multi-phase control has no phases")
        for phase_control in control:
            self._check_control(phase_control)

        trajectory: PreviewTrajectory = []
        for i, phase_control in enumerate(control):
            actual_state = state if i == 0 else trajectory[-1]

            if phase_control.phase is PhaseKind.FLIGHT:
                phase_traj = self.flight_preview(actual_state, phase_control)
            else:
                phase_traj = self.stance_preview(actual_state, phase_control)
            self.add_swing_pattern(phase_traj, actual_state, phase_control, system_com)

            logger.debug("Phase %d (%s): %d samples from t=%f", i, phase_control.phase.name,
                         len(phase_traj), actual_state.time)
            trajectory.extend(phase_traj)

        return trajectory

    def stance_preview(self, state: PreviewState, control: PreviewControl) -> PreviewTrajectory:
        """Preview a stance phase with the SLIP and spring-mass models.

        Parameters
        ----------
        state : PreviewState
            State at the beginning of the phase
        control : PreviewControl
            Phase control

        Returns
        -------
        PreviewTrajectory
            One sample per sample time in (0, duration], without foot data
        """
        self._check_control(control)
        self._check_model()
        if self.slip.height <= 0 or self.slip.stiffness <= 0:
            raise PreviewValidationError("SLIP height and stiffness must be positive")

        duration = control.duration

        # Coefficients of the SLIP response (horizontal)
        slip_omega, beta_1, beta_2, cop_disp = slip_coefficients(
            state.com_pos, state.com_vel, state.cop, control.terminal_cop,
            duration, self.gravity, self.slip.height)

        # Coefficients of the spring-mass response (vertical)
        spring_omega, d_1, d_2, initial_length, delta_length = spring_mass_coefficients(
            state.com_pos, state.com_vel, state.cop, control.terminal_length,
            duration, self.gravity, self.slip.stiffness, self.mass)

        terminal_cop = np.asarray(control.terminal_cop, dtype=float)[:2]
        cop_xy = np.asarray(state.cop, dtype=float)[:2]

        trajectory: PreviewTrajectory = []
        for k in range(num_samples(duration, self.sample_time)):
            time = min(self.sample_time * (k + 1), duration)

            current_state = PreviewState(time=state.time + time)

            com_pos, com_vel, com_acc = slip_horizontal(
                time, slip_omega, beta_1, beta_2, cop_disp, duration, cop_xy)
            current_state.com_pos[:2] = com_pos
            current_state.com_vel[:2] = com_vel
            current_state.com_acc[:2] = com_acc

            current_state.com_pos[Z], current_state.com_vel[Z], current_state.com_acc[Z] = \
                spring_mass_vertical(time, spring_omega, d_1, d_2, initial_length,
                                     delta_length, duration, self.gravity)

            current_state.head_pos, current_state.head_vel, current_state.head_acc = \
                heading_kinematics(time, state.head_pos, state.head_vel, control.head_acc)

            # Planned CoP moving from its initial value to the terminal one
            current_state.cop = np.array(state.cop, dtype=float)
            current_state.cop[:2] = cop_xy + (terminal_cop - cop_xy) * time / duration
            current_state.support_region = {name: np.array(pos, dtype=float)
                                             for name, pos in state.support_region.items()}

            trajectory.append(current_state)

        return trajectory

    def flight_preview(self, state: PreviewState, control: PreviewControl) -> PreviewTrajectory:
        """Preview a flight phase with the projectile model.

        The heading keeps its initial rate since the angular momentum is conserved
        without contacts.

        Parameters
        ----------
        state : PreviewState
            State at the beginning of the phase
        control : PreviewControl
            Phase control, only the duration is used

        Returns
        -------
        PreviewTrajectory
            One sample per sample time in (0, duration], without foot data
        """
        self._check_control(control)
        duration = control.duration

        trajectory: PreviewTrajectory = []
        for k in range(num_samples(duration, self.sample_time)):
            time = min(self.sample_time * (k + 1), duration)

            current_state = PreviewState(time=state.time + time)
            current_state.com_pos, current_state.com_vel, current_state.com_acc = \
                projectile(time, state.com_pos, state.com_vel, self.gravity)
            current_state.head_pos, current_state.head_vel, current_state.head_acc = \
                heading_kinematics(time, state.head_pos, state.head_vel, 0.0)
            current_state.cop = np.array(state.cop, dtype=float)

            trajectory.append(current_state)

        return trajectory

    def add_swing_pattern(self, trajectory: PreviewTrajectory, state: PreviewState,
                          control: PreviewControl, system_com: Optional[np.ndarray] = None) -> None:
        """Fill the foot motion of a previewed phase in place.

        Feet with a target in the control follow the swing pattern generator. The
        remaining feet stay on the ground in a stance phase, so their position
        w.r.t. the base changes as the base moves; in a flight phase they move
        with the base. Swinging feet leave the support region and join it again
        when they touch down at the end of the phase.

        Parameters
        ----------
        trajectory : PreviewTrajectory
            Phase samples computed by `stance_preview` or `flight_preview`
        state : PreviewState
            State at the beginning of the phase
        control : PreviewControl
            Phase control
        system_com : np.ndarray, optional
            System CoM w.r.t. the base frame

        Raises
        ------
        UnknownEndEffectorError
            If a foot target names a foot the robot model does not know, or if
            a foot of the model has no initial position in the state
        """
        end_effectors = self.system.get_end_effector_names()
        unknown = [name for name in control.foot_target
                   if name not in end_effectors or name not in state.foot_pos]
        if unknown:
            logger.error("Swing targets for unknown end-effectors %s", unknown)
            raise UnknownEndEffectorError(f"Unknown end-effectors {unknown}")
        missing = [name for name in end_effectors if name not in state.foot_pos]
        if missing:
            logger.error("End-effectors %s are missing from the preview state", missing)
            raise UnknownEndEffectorError(f"No initial position for end-effectors {missing}")
        if not trajectory:
            return

        system_com = self.floating_base_com if system_com is None else np.asarray(system_com)
        end_time = state.time + control.duration
        actual_base_pos = np.asarray(state.com_pos) - system_com

        for name, foot_pos in state.foot_pos.items():
            actual_pos = np.asarray(foot_pos, dtype=float)

            if name in control.foot_target:
                step_params = StepParameters(control.duration, self.step_height)
                self.foot_pattern_generator.set_parameters(state.time, actual_pos,
                                                           np.asarray(control.foot_target[name], dtype=float),
                                                           step_params)
                for sample in trajectory:
                    time = clamp(sample.time, state.time, end_time)
                    pos, vel, acc = self.foot_pattern_generator.generate_trajectory(time)
                    sample.foot_pos[name] = np.asarray(pos, dtype=float)
                    sample.foot_vel[name] = np.asarray(vel, dtype=float)
                    sample.foot_acc[name] = np.asarray(acc, dtype=float)
                    sample.support_region.pop(name, None)

                # Touch-down at the end of the phase
                trajectory[-1].support_region[name] = trajectory[-1].foot_pos[name].copy()
            elif control.phase is PhaseKind.FLIGHT:
                for sample in trajectory:
                    sample.foot_pos[name] = actual_pos.copy()
                    sample.foot_vel[name] = np.zeros(3)
                    sample.foot_acc[name] = np.zeros(3)
            else:
                # Foot on the ground, only its position w.r.t. the base changes
                for sample in trajectory:
                    base_pos = np.asarray(sample.com_pos) - system_com
                    sample.foot_pos[name] = (actual_pos + actual_base_pos) - base_pos
                    sample.foot_vel[name] = np.zeros(3)
                    sample.foot_acc[name] = np.zeros(3)
                    if name in sample.support_region:
                        sample.support_region[name] = sample.foot_pos[name].copy()

    def to_whole_body_state(self, preview_state: PreviewState,
                            system_com: Optional[np.ndarray] = None,
                            full_state: Optional[WholeBodyState] = None) -> WholeBodyState:
        """Map a preview state into a whole-body state.

        The reduced model only knows the base translation and heading. When a
        whole-body state is given, a copy of it is updated so that roll, pitch,
        joint and effort fields are kept; otherwise those fields are zero.

        Parameters
        ----------
        preview_state : PreviewState
            Reduced state
        system_com : np.ndarray, optional
            System CoM w.r.t. the base frame
        full_state : WholeBodyState, optional
            Whole-body state providing the fields the preview does not cover

        Returns
        -------
        WholeBodyState
            Whole-body state with base and contact fields set
        """
        system_com = self.floating_base_com if system_com is None else np.asarray(system_com)
        if full_state is None:
            dof = self.system.get_joint_dof()
            full_state = WholeBodyState(joint_pos=np.zeros(dof), joint_vel=np.zeros(dof),
                                        joint_acc=np.zeros(dof), joint_eff=np.zeros(dof))
        else:
            full_state = copy.deepcopy(full_state)
        full_state.time = preview_state.time

        full_state.base_pos[AZ] = preview_state.head_pos
        full_state.base_vel[AZ] = preview_state.head_vel
        full_state.base_acc[AZ] = preview_state.head_acc

        # Base motion that produces the CoM motion, see `from_whole_body_state`
        com_rate_offset = np.cross(full_state.base_vel[AX:AZ + 1], system_com)
        joint_vel = np.asarray(full_state.joint_vel, dtype=float).ravel()
        if joint_vel.size and np.any(joint_vel):
            base_rotation = get_rotation_rpy(*full_state.base_pos[AX:AZ + 1])
            jacobian_com = self.system.calc_jacobian_com(full_state.joint_pos)
            com_rate_offset = com_rate_offset + base_rotation @ jacobian_com @ joint_vel

        full_state.base_pos[LX:LZ + 1] = np.asarray(preview_state.com_pos) - system_com
        full_state.base_vel[LX:LZ + 1] = np.asarray(preview_state.com_vel) - com_rate_offset
        full_state.base_acc[LX:LZ + 1] = preview_state.com_acc

        full_state.contact_pos = {name: np.array(pos, dtype=float) for name, pos in preview_state.foot_pos.items()}
        full_state.contact_vel = {name: np.array(vel, dtype=float) for name, vel in preview_state.foot_vel.items()}
        full_state.contact_acc = {name: np.array(acc, dtype=float) for name, acc in preview_state.foot_acc.items()}
        return full_state

    def from_whole_body_state(self, full_state: WholeBodyState) -> Tuple[PreviewState, np.ndarray]:
        """Map a whole-body state into a preview state.

        Parameters
        ----------
        full_state : WholeBodyState
            Whole-body state

        Returns
        -------
        Tuple[PreviewState, np.ndarray]
            Preview state and the system CoM w.r.t. the base position (world
            orientation), to be passed back to the preview and translation calls
        """
        self._check_model()
        base_pos = np.asarray(full_state.base_pos, dtype=float)
        base_translation = base_pos[LX:LZ + 1]
        base_rotation = get_rotation_rpy(*base_pos[AX:AZ + 1])

        preview_state = PreviewState(time=full_state.time)

        # System CoM relative to the base position
        zero_translation = base_pos.copy()
        zero_translation[LX:LZ + 1] = 0.0
        system_com = self.system.get_system_com(zero_translation, full_state.joint_pos)

        preview_state.com_pos = base_translation + system_com
        preview_state.com_vel = self.system.get_system_com_rate(base_pos, full_state.joint_pos,
                                                                full_state.base_vel, full_state.joint_vel)
        # Joint acceleration components are neglected
        preview_state.com_acc = np.array(full_state.base_acc[LX:LZ + 1], dtype=float)
        preview_state.head_pos = float(full_state.base_pos[AZ])
        preview_state.head_vel = float(full_state.base_vel[AZ])
        preview_state.head_acc = float(full_state.base_acc[AZ])

        # CoP in the world frame
        cop_wrt_base = self.dynamics.compute_center_of_pressure(full_state.contact_eff,
                                                                full_state.contact_pos,
                                                                self.system.get_end_effector_names())
        preview_state.cop = base_translation + base_rotation @ cop_wrt_base

        # Support region from the active contacts
        active_contacts = self.dynamics.get_active_contacts(full_state.contact_eff, self.force_threshold)
        preview_state.support_region = {name: np.array(full_state.contact_pos[name], dtype=float)
                                        for name in active_contacts if name in full_state.contact_pos}

        preview_state.foot_pos = {name: np.array(pos, dtype=float) for name, pos in full_state.contact_pos.items()}
        preview_state.foot_vel = {name: np.array(vel, dtype=float) for name, vel in full_state.contact_vel.items()}
        preview_state.foot_acc = {name: np.array(acc, dtype=float) for name, acc in full_state.contact_acc.items()}

        if logging.getLogger().isEnabledFor(logging.DEBUG):
            logger.debug("Preview state at t=%f: com=%s, cop=%s, support=%s", preview_state.time,
                         preview_state.com_pos, preview_state.cop, list(preview_state.support_region))

        return preview_state, system_com

    def to_whole_body_trajectory(self, preview_traj: PreviewTrajectory,
                                 system_com: Optional[np.ndarray] = None,
                                 full_state: Optional[WholeBodyState] = None) -> WholeBodyTrajectory:
        """Map every preview state with `to_whole_body_state`, keeping the order.

        `full_state`, when given, provides the fields the preview does not cover
        for every sample.
        """
        return [self.to_whole_body_state(preview_state, system_com, full_state) for preview_state in preview_traj]

    def from_whole_body_trajectory(self, full_traj: WholeBodyTrajectory) -> Tuple[PreviewTrajectory, List[np.ndarray]]:
        """Map every whole-body state with `from_whole_body_state`.

        Returns
        -------
        Tuple[PreviewTrajectory, List[np.ndarray]]
            Preview states and the system CoM of every sample, in order
        """
        preview_traj: PreviewTrajectory = []
        system_coms: List[np.ndarray] = []
        for full_state in full_traj:
            preview_state, system_com = self.from_whole_body_state(full_state)
            preview_traj.append(preview_state)
            system_coms.append(system_com)
        return preview_traj, system_coms

    def _check_control(self, control: PreviewControl) -> None:
        if control.duration <= 0:
            logger.error("Invalid phase duration %f", control.duration)
            raise PreviewValidationError(f"Phase duration must be positive, got {control.duration}")

    def _check_model(self) -> None:
        if self.mass <= 0:
            logger.error("Preview requested before a robot model was loaded")
            raise ModelLoadError("No robot model loaded, reset the preview from a URDF model first")
