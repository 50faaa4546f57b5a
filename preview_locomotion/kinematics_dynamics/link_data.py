from typing import List, Optional

import numpy as np


class LinkData:
    """
    One rigid body of the kinematic tree together with the joint that attaches
    it to its parent. Static properties come from the robot description, the
    pose fields are refreshed by forward kinematics.
    """
    def __init__(self, name: str = ""):
        self.name: str = name

        # Tree relationships
        self.parent: Optional[str] = None
        self.children: List[str] = []

        # Joint to the parent link
        self.joint_name: str = ""
        self.joint_type: str = "fixed"
        self.joint_axis: np.ndarray = np.array([1.0, 0.0, 0.0])
        self.relative_position: np.ndarray = np.zeros(3)
        self.relative_rotation: np.ndarray = np.eye(3)

        # Physical properties
        self.mass: float = 0.0
        self.center_of_mass: np.ndarray = np.zeros(3)
        self.inertia: np.ndarray = np.zeros((3, 3))

        # Joint state
        self.joint_angle: float = 0.0

        # Pose w.r.t. the base frame
        self.position: np.ndarray = np.zeros(3)
        self.rotation: np.ndarray = np.eye(3)

    @property
    def is_movable(self) -> bool:
        return self.joint_type in ("revolute", "continuous", "prismatic")

    @property
    def is_leaf(self) -> bool:
        return not self.children
