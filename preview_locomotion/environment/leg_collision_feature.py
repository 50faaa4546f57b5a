import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Vertex = Tuple[int, int]


@dataclass
class SearchArea:
    """Rectangular work area of a leg, relative to its nominal stance."""
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0
    grid_resolution: float = 0.04


@dataclass
class RobotAndTerrain:
    """Robot pose, candidate foothold and discretized terrain.

    Attributes
    ----------
    height_map : Dict[Vertex, float]
        Terrain height by grid vertex, see `LegCollisionFeature.coord_to_vertex`
    resolution : float
        Grid resolution of the height map (m)
    position : np.ndarray
        Horizontal position of the robot, shape (2,)
    orientation : float
        Heading of the robot (rad)
    foothold : np.ndarray
        Candidate foothold position, shape (3,)
    end_effector : Hashable
        Leg of the foothold, key of the work areas and nominal stance
    """
    height_map: Dict[Vertex, float] = field(default_factory=dict)
    resolution: float = 0.04
    position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    orientation: float = 0.0
    foothold: np.ndarray = field(default_factory=lambda: np.zeros(3))
    end_effector: Hashable = 0


class LegCollisionFeature:
    """Penalizes footholds that would make the leg collide with the terrain.

    The terrain under the reachable area of the leg is scanned and the foothold
    is compared with the highest obstacle found there.

    Parameters
    ----------
    leg_work_areas : Dict[Hashable, SearchArea]
        Work area of every leg
    nominal_stance : Dict[Hashable, np.ndarray]
        Nominal foot position of every leg w.r.t. the robot position
    """

    def __init__(self, leg_work_areas: Dict[Hashable, SearchArea],
                 nominal_stance: Dict[Hashable, np.ndarray]):
        self.name = "Potential Leg Collision"
        self.leg_work_areas = leg_work_areas
        self.nominal_stance = nominal_stance

    @staticmethod
    def coord_to_vertex(coord: np.ndarray, resolution: float) -> Vertex:
        """Grid vertex (nearest cell index) of a horizontal coordinate."""
        return (int(np.floor(coord[0] / resolution + 0.5)),
                int(np.floor(coord[1] / resolution + 0.5)))

    def compute_reward(self, info: RobotAndTerrain) -> float:
        """Compute the collision reward of a foothold.

        Parameters
        ----------
        info : RobotAndTerrain
            Robot pose, foothold and terrain

        Returns
        -------
        float
            Minus the height of the highest terrain point in the leg area above the
            foothold, or 0 when the foothold is not below it or no terrain is known
        """
        if info.end_effector not in self.leg_work_areas:
            raise KeyError(f"No work area for end-effector {info.end_effector!r}")

        position = np.asarray(info.position, dtype=float)[:2]
        yaw = info.orientation
        leg_area = self.leg_work_areas[info.end_effector]
        nominal_stance = np.asarray(self.nominal_stance[info.end_effector], dtype=float)

        boundary_min = position + nominal_stance[:2] + np.array([leg_area.min_x, leg_area.min_y])
        boundary_max = position + nominal_stance[:2] + np.array([leg_area.max_x, leg_area.max_y])

        # Maximum terrain height inside the leg area, rotated by the heading
        max_height = -np.inf
        cos_yaw, sin_yaw = np.cos(yaw), np.sin(yaw)
        for y in np.arange(boundary_min[1], boundary_max[1], leg_area.grid_resolution):
            for x in np.arange(boundary_min[0], boundary_max[0], leg_area.grid_resolution):
                coord = np.array([(x - position[0]) * cos_yaw - (y - position[1]) * sin_yaw + position[0],
                                  (x - position[0]) * sin_yaw + (y - position[1]) * cos_yaw + position[1]])
                height = info.height_map.get(self.coord_to_vertex(coord, info.resolution))
                if height is not None and height > max_height:
                    max_height = height

        if not np.isfinite(max_height):
            logger.debug("No terrain information around leg %s", info.end_effector)
            return 0.0

        max_diff_height = max_height - float(info.foothold[2])
        return -max_diff_height if max_diff_height > 0 else 0.0
