import numpy as np


def get_rotation_x(angle: float) -> np.ndarray:
    """
    Elementary rotation about the X axis.

    Parameters
    ----------
    angle : float
        Roll angle in radians

    Returns
    -------
    np.ndarray
        3x3 rotation matrix
    """
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[1.0, 0.0, 0.0],
                     [0.0, c, -s],
                     [0.0, s, c]])


def get_rotation_y(angle: float) -> np.ndarray:
    """
    Elementary rotation about the Y axis.

    Parameters
    ----------
    angle : float
        Pitch angle in radians

    Returns
    -------
    np.ndarray
        3x3 rotation matrix
    """
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0.0, s],
                     [0.0, 1.0, 0.0],
                     [-s, 0.0, c]])


def get_rotation_z(angle: float) -> np.ndarray:
    """
    Elementary rotation about the Z axis (heading).

    Parameters
    ----------
    angle : float
        Yaw angle in radians

    Returns
    -------
    np.ndarray
        3x3 rotation matrix
    """
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, -s, 0.0],
                     [s, c, 0.0],
                     [0.0, 0.0, 1.0]])


def get_rotation_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """
    Rotation matrix from roll, pitch and yaw angles.

    The angles are composed in ZYX order (R = Rz(yaw) Ry(pitch) Rx(roll)), which
    is the convention used both by URDF joint origins and by the angular part of
    the floating-base pose.

    Parameters
    ----------
    roll : float
        Rotation about X in radians
    pitch : float
        Rotation about Y in radians
    yaw : float
        Rotation about Z in radians

    Returns
    -------
    np.ndarray
        3x3 rotation matrix
    """
    return get_rotation_z(yaw) @ get_rotation_y(pitch) @ get_rotation_x(roll)


def calc_hatto(vector3d: np.ndarray) -> np.ndarray:
    """
    Skew-symmetric (hat) matrix of a 3D vector, so that hat(a) @ b == a x b.

    Parameters
    ----------
    vector3d : np.ndarray
        3D vector [x, y, z]

    Returns
    -------
    np.ndarray
        3x3 skew-symmetric matrix
    """
    x, y, z = np.asarray(vector3d, dtype=float).ravel()[:3]
    return np.array([[0.0, -z, y],
                     [z, 0.0, -x],
                     [-y, x, 0.0]])


def calc_rodrigues(hatto: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotation about a unit axis with Rodrigues' formula.

    Parameters
    ----------
    hatto : np.ndarray
        Hat matrix of the (unit) rotation axis, see `calc_hatto`
    angle : float
        Rotation angle in radians

    Returns
    -------
    np.ndarray
        3x3 rotation matrix
    """
    return np.eye(3) + hatto * np.sin(angle) + (hatto @ hatto) * (1.0 - np.cos(angle))
