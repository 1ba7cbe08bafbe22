"""
Centralized quaternion/Euler conversion utilities.

Every conversion between the bone model (Euler degrees) and the BlockyModel
node tree (unit quaternions) goes through these functions, with the rotation
order passed explicitly.

Key principles:
- One global order, EULER_ORDER, used at every call site
- Euler angles are always stored as [x, y, z] degrees, whatever the order
- Quaternions are [w, x, y, z] with w >= 0
- Angles are normalized to (-180°, 180°]
"""

import math
from typing import List, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

# Intrinsic Z, then Y, then X (scipy uppercase = intrinsic)
EULER_ORDER = 'ZYX'

ANGLE_PRECISION = 4  # Decimal places for Euler output
IDENTITY_EPSILON = 1e-7

_AXES = 'XYZ'


def _validate_order(order: str) -> str:
    if len(order) != 3 or sorted(order.upper()) != sorted(_AXES) or not order.isupper():
        raise ValueError(f"Rotation order must be an intrinsic permutation of 'XYZ', got '{order}'")
    return order


def euler_to_quaternion(euler: List[float], order: str = EULER_ORDER) -> List[float]:
    """
    Convert Euler angles [x, y, z] in degrees to quaternion [w, x, y, z].

    Args:
        euler: Euler angles in degrees, indexed by axis [x, y, z]
        order: Intrinsic axis sequence the angles are composed in

    Returns:
        Normalized quaternion as [w, x, y, z] with consistent sign (w >= 0)
    """
    order = _validate_order(order)
    angles = np.asarray(euler, dtype=float)
    # scipy wants the angles in sequence order
    sequenced = [angles[_AXES.index(axis)] for axis in order]
    x, y, z, w = Rotation.from_euler(order, sequenced, degrees=True).as_quat()
    return normalize_quaternion([w, x, y, z])


def quaternion_to_euler(quat: List[float], order: str = EULER_ORDER) -> List[float]:
    """
    Convert quaternion [w, x, y, z] to Euler angles [x, y, z] in degrees.

    Inverse of euler_to_quaternion for the same order. When the middle
    angle is at ±90° (gimbal lock) the split between the outer two axes is
    not unique; scipy picks one and warns.
    """
    order = _validate_order(order)
    w, x, y, z = normalize_quaternion(quat)
    sequenced = Rotation.from_quat([x, y, z, w]).as_euler(order, degrees=True)
    by_axis = [0.0, 0.0, 0.0]
    for axis, angle in zip(order, sequenced):
        by_axis[_AXES.index(axis)] = _normalize_angle(float(angle))
    return by_axis


def is_identity(quat: List[float], epsilon: float = IDENTITY_EPSILON) -> bool:
    _, x, y, z = normalize_quaternion(quat)
    return max(abs(x), abs(y), abs(z)) < epsilon


def is_gimbal_lock(euler: List[float], order: str = EULER_ORDER, tolerance: float = 0.01) -> bool:
    """Check if the middle angle of the sequence is near ±90°."""
    order = _validate_order(order)
    middle = euler[_AXES.index(order[1])]
    return abs(abs(middle) - 90.0) < tolerance


def roundtrip_error(quat: List[float], order: str = EULER_ORDER) -> Tuple[List[float], float]:
    """
    Measure roundtrip accuracy: quat -> euler -> quat.

    Returns:
        Tuple of (final_quat, angular_error_degrees)
    """
    euler = quaternion_to_euler(quat, order)
    final_quat = euler_to_quaternion(euler, order)
    return final_quat, quaternion_angular_error(quat, final_quat)


def quaternion_angular_error(q1: List[float], q2: List[float]) -> float:
    """Angle in degrees between the rotations two quaternions represent."""
    q1_norm = normalize_quaternion(q1)
    q2_norm = normalize_quaternion(q2)

    # abs() because q and -q represent the same rotation
    dot = sum(a * b for a, b in zip(q1_norm, q2_norm))
    dot = max(-1.0, min(1.0, abs(dot)))

    return 2 * math.degrees(math.acos(dot))


def normalize_quaternion(quat: List[float]) -> List[float]:
    """Normalize quaternion to unit length and ensure consistent sign (w >= 0)."""
    magnitude = math.sqrt(sum(c * c for c in quat))
    if magnitude == 0:
        return [1.0, 0.0, 0.0, 0.0]

    normalized = [float(c) / magnitude for c in quat]

    # q and -q represent the same rotation, so we choose w >= 0
    if normalized[0] < 0:
        normalized = [-c for c in normalized]

    return normalized


def _normalize_angle(angle_deg: float) -> float:
    """Normalize angle to (-180, 180] range."""
    while angle_deg > 180:
        angle_deg -= 360
    while angle_deg <= -180:
        angle_deg += 360
    angle_deg = round(angle_deg, ANGLE_PRECISION)
    # round() can land exactly on -180 or produce -0.0
    if angle_deg == -180.0:
        angle_deg = 180.0
    return angle_deg + 0.0
