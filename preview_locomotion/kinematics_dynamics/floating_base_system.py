import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Sequence

import numpy as np

from preview_locomotion.exceptions import ModelLoadError
from preview_locomotion.mathematics import calc_hatto, calc_rodrigues, get_rotation_rpy

from .link_data import LinkData

logger = logging.getLogger(__name__)

DEFAULT_GRAVITY = 9.81


def _parse_vector(text: Optional[str], default: Sequence[float]) -> np.ndarray:
    if text is None:
        return np.array(default, dtype=float)
    values = [float(v) for v in text.split()]
    if len(values) != len(default):
        raise ModelLoadError(f"Expected {len(default)} values, got '{text}'")
    return np.array(values)


class FloatingBaseSystem:
    """Rigid-body model of a floating-base robot built from a URDF description.

    The tree is rooted at the floating base. All kinematic quantities computed
    by forward kinematics are expressed in the base frame; the world pose of the
    base is applied on top of them by the CoM queries.
    """

    def __init__(self):
        self.link_data: Dict[str, LinkData] = {}
        self.root: Optional[str] = None
        self.joint_names: List[str] = []
        self.end_effector_names: List[str] = []
        self.gravity: float = DEFAULT_GRAVITY
        self._movable_links: List[str] = []

    def reset_from_urdf_model(self, urdf_model: str) -> None:
        """
        Build the kinematic tree from URDF text.
        Args:
            urdf_model: URDF description as an XML string
        Raises:
            ModelLoadError: if the description is not valid XML or has no single root link
        """
        try:
            robot = ET.fromstring(urdf_model)
        except ET.ParseError as err:
            logger.error("Failed to parse URDF model: %s", err)
            raise ModelLoadError(f"Invalid URDF model: {err}") from err

        link_data: Dict[str, LinkData] = {}
        for link in robot.findall('link'):
            data = LinkData(link.get('name'))
            inertial = link.find('inertial')
            if inertial is not None:
                mass = inertial.find('mass')
                data.mass = float(mass.get('value', 0.0)) if mass is not None else 0.0
                origin = inertial.find('origin')
                if origin is not None:
                    data.center_of_mass = _parse_vector(origin.get('xyz'), (0.0, 0.0, 0.0))
                inertia = inertial.find('inertia')
                if inertia is not None:
                    ixx, ixy, ixz, iyy, iyz, izz = (float(inertia.get(k, 0.0)) for k in
                                                    ('ixx', 'ixy', 'ixz', 'iyy', 'iyz', 'izz'))
                    data.inertia = np.array([[ixx, ixy, ixz],
                                             [ixy, iyy, iyz],
                                             [ixz, iyz, izz]])
            link_data[data.name] = data

        floating_parents = set()
        joint_order: List[str] = []
        for joint in robot.findall('joint'):
            parent = joint.find('parent').get('link')
            child = joint.find('child').get('link')
            if parent not in link_data or child not in link_data:
                raise ModelLoadError(f"Joint '{joint.get('name')}' references an unknown link")

            # A floating joint only attaches the base to the world
            if joint.get('type') == 'floating':
                floating_parents.add(parent)
                continue

            data = link_data[child]
            data.parent = parent
            data.joint_name = joint.get('name')
            data.joint_type = joint.get('type', 'fixed')
            origin = joint.find('origin')
            if origin is not None:
                data.relative_position = _parse_vector(origin.get('xyz'), (0.0, 0.0, 0.0))
                data.relative_rotation = get_rotation_rpy(*_parse_vector(origin.get('rpy'), (0.0, 0.0, 0.0)))
            axis = joint.find('axis')
            if axis is not None:
                data.joint_axis = _parse_vector(axis.get('xyz'), (1.0, 0.0, 0.0))
                data.joint_axis = data.joint_axis / np.linalg.norm(data.joint_axis)
            link_data[parent].children.append(child)
            joint_order.append(child)

        for name in floating_parents:
            link_data.pop(name, None)

        roots = [name for name, data in link_data.items() if data.parent is None]
        if len(roots) != 1:
            logger.error("URDF model must have a single root link, found %s", roots)
            raise ModelLoadError(f"Expected a single root link, found {roots}")

        self.link_data = link_data
        self.root = roots[0]
        self._movable_links = [name for name in joint_order if link_data[name].is_movable]
        self.joint_names = [link_data[name].joint_name for name in self._movable_links]
        self.end_effector_names = [name for name in joint_order
                                   if link_data[name].is_leaf and link_data[name].joint_type == 'fixed']

        logger.info("Loaded robot '%s': %d links, %d joints, end-effectors %s",
                    robot.get('name'), len(link_data), len(self.joint_names), self.end_effector_names)

    def set_end_effector_names(self, names: Sequence[str]) -> None:
        unknown = [name for name in names if name not in self.link_data]
        if unknown:
            raise ModelLoadError(f"Unknown end-effector links {unknown}")
        self.end_effector_names = list(names)

    def get_end_effector_names(self) -> List[str]:
        return list(self.end_effector_names)

    def get_joint_names(self) -> List[str]:
        return list(self.joint_names)

    def get_joint_dof(self) -> int:
        return len(self.joint_names)

    def calc_total_mass(self, link: str) -> float:
        """Mass of a link and of its whole subtree"""
        data = self.link_data[link]
        return data.mass + sum(self.calc_total_mass(child) for child in data.children)

    def calc_mc(self, link: str) -> np.ndarray:
        """Mass-weighted CoM (sum of m * c) of a link and of its subtree"""
        data = self.link_data[link]
        mc = data.mass * (data.rotation @ data.center_of_mass + data.position)
        for child in data.children:
            mc = mc + self.calc_mc(child)
        return mc

    def calc_forward_kinematics(self, link: str) -> None:
        """Propagate the link poses (base frame) from `link` down to the leaves"""
        data = self.link_data[link]
        if data.parent is None:
            data.position = np.zeros(3)
            data.rotation = np.eye(3)
        else:
            parent = self.link_data[data.parent]
            data.position = parent.rotation @ data.relative_position + parent.position
            data.rotation = parent.rotation @ data.relative_rotation
            if data.joint_type in ("revolute", "continuous"):
                data.rotation = data.rotation @ calc_rodrigues(calc_hatto(data.joint_axis), data.joint_angle)
            elif data.joint_type == "prismatic":
                data.position = data.position + data.rotation @ data.joint_axis * data.joint_angle

        for child in data.children:
            self.calc_forward_kinematics(child)

    def set_joint_angles(self, joint_pos: np.ndarray) -> None:
        self._check_loaded()
        joint_pos = np.asarray(joint_pos, dtype=float).ravel()
        if joint_pos.size != len(self._movable_links):
            raise ValueError(f"Expected {len(self._movable_links)} joint positions, got {joint_pos.size}")
        for name, angle in zip(self._movable_links, joint_pos):
            self.link_data[name].joint_angle = angle
        self.calc_forward_kinematics(self.root)

    def get_total_mass(self) -> float:
        self._check_loaded()
        return self.calc_total_mass(self.root)

    def get_floating_base_com(self) -> np.ndarray:
        """CoM of the floating-base body in the base frame"""
        self._check_loaded()
        return self.link_data[self.root].center_of_mass.copy()

    def get_com_wrt_base(self, joint_pos: np.ndarray) -> np.ndarray:
        """System CoM in the base frame for a given joint configuration"""
        self.set_joint_angles(joint_pos)
        return self.calc_mc(self.root) / self.get_total_mass()

    def get_system_com(self, base_pos: np.ndarray, joint_pos: np.ndarray) -> np.ndarray:
        """
        System CoM in the world frame.
        Args:
            base_pos: 6D base pose [roll, pitch, yaw, x, y, z]
            joint_pos: joint positions ordered as `joint_names`
        Returns:
            3D CoM position
        """
        base_pos = np.asarray(base_pos, dtype=float)
        rotation = get_rotation_rpy(*base_pos[:3])
        return base_pos[3:6] + rotation @ self.get_com_wrt_base(joint_pos)

    def get_system_com_rate(self, base_pos: np.ndarray, joint_pos: np.ndarray,
                            base_vel: np.ndarray, joint_vel: np.ndarray) -> np.ndarray:
        """
        System CoM velocity in the world frame.

        The angular part of the base velocity is taken as the world angular
        velocity of the base. The joint contribution uses the analytic CoM
        Jacobian, see `calc_jacobian_com`.
        Args:
            base_pos: 6D base pose
            joint_pos: joint positions
            base_vel: 6D base velocity [wx, wy, wz, vx, vy, vz]
            joint_vel: joint velocities
        Returns:
            3D CoM velocity
        """
        base_pos = np.asarray(base_pos, dtype=float)
        base_vel = np.asarray(base_vel, dtype=float)
        joint_pos = np.asarray(joint_pos, dtype=float).ravel()
        joint_vel = np.asarray(joint_vel, dtype=float).ravel()
        rotation = get_rotation_rpy(*base_pos[:3])

        com_wrt_base = self.get_com_wrt_base(joint_pos)
        com_joint_rate = np.zeros(3)
        if joint_vel.size and np.any(joint_vel):
            jacobian_com = self.calc_jacobian_com(joint_pos)
            com_joint_rate = jacobian_com @ joint_vel

        return base_vel[3:6] + np.cross(base_vel[:3], rotation @ com_wrt_base) + rotation @ com_joint_rate

    def calc_jacobian_com(self, joint_pos: np.ndarray) -> np.ndarray:
        """
        CoM Jacobian (3 x n) in the base frame.

        Every joint moves the CoM of its subtree: a revolute joint by
        (R a) x (c_sub - p), a prismatic one along R a, weighted by the share
        of the subtree in the total mass.
        Args:
            joint_pos: joint positions ordered as `joint_names`
        Returns:
            CoM Jacobian, one column per joint
        """
        self.set_joint_angles(joint_pos)
        total_mass = self.get_total_mass()

        jacobian_com = np.zeros((3, len(self._movable_links)))
        for i, name in enumerate(self._movable_links):
            data = self.link_data[name]
            axis = data.rotation @ data.joint_axis
            subtree_mass = self.calc_total_mass(name)
            if data.joint_type == "prismatic":
                jacobian_com[:, i] = axis * subtree_mass / total_mass
            else:
                og = self.calc_mc(name) - subtree_mass * data.position
                jacobian_com[:, i] = np.cross(axis, og) / total_mass
        return jacobian_com

    def _check_loaded(self) -> None:
        if self.root is None:
            raise ModelLoadError("No robot model loaded")
