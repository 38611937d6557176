"""
Pose utilities for axisplan using COMPAS, numpy and scipy.

Poses travel through the public API as ``compas.geometry.Frame`` objects.
Composition and comparison happen on 4x4 numpy matrices, and rotation math
is delegated to ``scipy.spatial.transform.Rotation``.
"""

import math
from dataclasses import dataclass

import numpy as np
from compas.geometry import Frame, Point, Vector
from scipy.spatial.transform import Rotation

# Distance below which two orientation vector components are treated as equal
OV_EPSILON = 1e-4


def pose_to_matrix(pose: Frame) -> np.ndarray:
    """
    Convert a COMPAS frame into a homogeneous 4x4 matrix.

    Args:
        pose: Frame to convert

    Returns:
        4x4 numpy array with the frame axes as rotation columns
    """
    matrix = np.eye(4)
    matrix[:3, 0] = list(pose.xaxis)
    matrix[:3, 1] = list(pose.yaxis)
    matrix[:3, 2] = list(pose.zaxis)
    matrix[:3, 3] = list(pose.point)
    return matrix


def matrix_to_pose(matrix: np.ndarray) -> Frame:
    """
    Convert a homogeneous 4x4 matrix into a COMPAS frame.

    Args:
        matrix: 4x4 transformation matrix

    Returns:
        Frame with the matrix translation as origin
    """
    matrix = np.asarray(matrix, dtype=float)
    return Frame(
        Point(*matrix[:3, 3]),
        Vector(*matrix[:3, 0]),
        Vector(*matrix[:3, 1]),
    )


def compose(*poses: Frame) -> Frame:
    """Chain poses left to right (parent first)."""
    matrix = np.eye(4)
    for pose in poses:
        matrix = matrix @ pose_to_matrix(pose)
    return matrix_to_pose(matrix)


def invert(pose: Frame) -> Frame:
    """Return the inverse transform of a pose."""
    matrix = pose_to_matrix(pose)
    inverse = np.eye(4)
    inverse[:3, :3] = matrix[:3, :3].T
    inverse[:3, 3] = -matrix[:3, :3].T @ matrix[:3, 3]
    return matrix_to_pose(inverse)


def squared_norm_metric(from_pose: Frame, to_pose: Frame) -> float:
    """
    Squared distance between two poses.

    Position error and rotation-vector error are summed, so the result is
    smooth around zero and suitable as an optimization objective.
    """
    a = pose_to_matrix(from_pose)
    b = pose_to_matrix(to_pose)
    delta = Rotation.from_matrix(a[:3, :3].T @ b[:3, :3]).as_rotvec()
    return float(np.sum((b[:3, 3] - a[:3, 3]) ** 2) + np.sum(delta**2))


def _rz(angle: float) -> np.ndarray:
    return Rotation.from_euler("z", angle).as_matrix()


def _ry(angle: float) -> np.ndarray:
    return Rotation.from_euler("y", angle).as_matrix()


@dataclass(frozen=True)
class OrientationVector:
    """
    Orientation as a pointing direction plus a spin about it.

    (ox, oy, oz) is where the frame's z-axis points and theta (degrees) is
    the rotation about that axis. The rotation matrix is
    ``Rz(lon) @ Ry(lat) @ Rz(theta)`` with ``lat = acos(oz)`` and
    ``lon = atan2(oy, ox)``; at the poles ``lon`` is zero and theta carries
    the whole spin.
    """

    ox: float
    oy: float
    oz: float
    theta: float

    @classmethod
    def from_matrix(cls, rotation: np.ndarray) -> "OrientationVector":
        rotation = np.asarray(rotation, dtype=float)[:3, :3]
        ox, oy, oz = rotation[:, 2]
        lat = math.acos(max(-1.0, min(1.0, oz)))
        lon = 0.0
        if 1 - abs(oz) > OV_EPSILON:
            lon = math.atan2(oy, ox)
        spin = _ry(-lat) @ _rz(-lon) @ rotation
        theta = math.degrees(math.atan2(spin[1, 0], spin[0, 0]))
        return cls(float(ox), float(oy), float(oz), theta)

    def to_matrix(self) -> np.ndarray:
        norm = math.sqrt(self.ox**2 + self.oy**2 + self.oz**2)
        oz = self.oz / norm
        lat = math.acos(max(-1.0, min(1.0, oz)))
        lon = 0.0
        if 1 - abs(oz) > OV_EPSILON:
            lon = math.atan2(self.oy, self.ox)
        return _rz(lon) @ _ry(lat) @ _rz(math.radians(self.theta))


def fix_ov_increment(goal: Frame, seed: Frame) -> Frame:
    """
    Adjust theta of a goal that is a pure orientation increment off a pole.

    When the seed points straight along +/-z and the goal only tilts the
    pointing direction (same position, same theta), the orientation vector
    representation assigns the tilt direction to theta. The goal's theta is
    compensated so the requested motion stays a pure tilt instead of an
    unexpected spin. Any other goal is returned unchanged.

    Args:
        goal: Requested goal pose
        seed: Pose of the current configuration

    Returns:
        The adjusted goal, or ``goal`` itself
    """
    goal_matrix = pose_to_matrix(goal)
    seed_matrix = pose_to_matrix(seed)
    goal_ov = OrientationVector.from_matrix(goal_matrix)
    seed_ov = OrientationVector.from_matrix(seed_matrix)

    # Nothing to do for translations or theta increments
    if not np.allclose(goal_matrix[:3, 3], seed_matrix[:3, 3], atol=OV_EPSILON):
        return goal
    if abs(goal_ov.theta - seed_ov.theta) > OV_EPSILON:
        return goal
    # Only applies when leaving a pole
    if 1 - abs(seed_ov.oz) > OV_EPSILON or abs(goal_ov.oz - seed_ov.oz) <= OV_EPSILON:
        return goal

    x_inc = goal_ov.ox - seed_ov.ox
    y_inc = round(goal_ov.oy - seed_ov.oy, 2)
    if abs(goal_ov.ox) <= OV_EPSILON:
        adj = -90.0 if y_inc < 0 else 90.0
    else:
        adj = math.degrees(math.atan2(y_inc, x_inc))

    if seed_ov.oz > 0:
        theta = goal_ov.theta - adj
    else:
        theta = goal_ov.theta + adj

    adjusted = np.eye(4)
    adjusted[:3, :3] = OrientationVector(goal_ov.ox, goal_ov.oy, goal_ov.oz, theta).to_matrix()
    adjusted[:3, 3] = goal_matrix[:3, 3]
    return matrix_to_pose(adjusted)
