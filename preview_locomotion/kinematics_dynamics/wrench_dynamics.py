import logging
from typing import Dict, Iterable, List

import numpy as np

from .rbd import LZ

logger = logging.getLogger(__name__)


class WrenchDynamics:
    """Contact-wrench computations used to build the reduced state.

    Contact wrenches are 6D vectors ordered [angular, linear]; the normal force
    is the linear Z component. Contact positions are expressed in the base frame.
    """

    def compute_center_of_pressure(self, contact_eff: Dict[str, np.ndarray],
                                   contact_pos: Dict[str, np.ndarray],
                                   ee_names: Iterable[str]) -> np.ndarray:
        """Compute the center of pressure in the base frame.

        The CoP is the normal-force weighted mean of the contact positions. Only
        contacts pushing on the ground (positive normal force) contribute.

        Parameters
        ----------
        contact_eff : Dict[str, np.ndarray]
            Contact wrenches by end-effector name
        contact_pos : Dict[str, np.ndarray]
            Contact positions by end-effector name
        ee_names : Iterable[str]
            End-effectors to consider

        Returns
        -------
        np.ndarray
            CoP position, zero when no contact carries load
        """
        weighted_pos = np.zeros(3)
        total_force = 0.0
        for name in ee_names:
            if name not in contact_eff or name not in contact_pos:
                continue

            normal_force = float(np.asarray(contact_eff[name])[LZ])
            if normal_force <= 0.0:
                continue
            weighted_pos += normal_force * np.asarray(contact_pos[name], dtype=float)
            total_force += normal_force

        if total_force <= 0.0:
            logger.debug("No loaded contact, center of pressure set to the base origin")
            return np.zeros(3)
        return weighted_pos / total_force

    def get_active_contacts(self, contact_eff: Dict[str, np.ndarray],
                            force_threshold: float) -> List[str]:
        """Names of the contacts whose normal force exceeds the threshold."""
        return [name for name, wrench in contact_eff.items()
                if float(np.asarray(wrench)[LZ]) > force_threshold]
