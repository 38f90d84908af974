"""
Keeps furniture inside the room after a move.

Two policies exist. CENTER_ONLY only keeps the item's centre point inside
the room, so its edges may overlap a wall. FOOTPRINT keeps the whole
rotated footprint inside. One policy is chosen per session and used for
every clamp.
"""

import math
from enum import Enum
from typing import Tuple


class ClampPolicy(str, Enum):
    CENTER_ONLY = "clampCenterOnly"
    FOOTPRINT = "clampFootprint"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def normalize_rotation(degrees: float) -> float:
    """Map any angle into [0, 360)."""
    result = math.fmod(degrees, 360.0)
    if result < 0:
        result += 360.0
    # fmod of a tiny negative value can round back up to exactly 360
    if result >= 360.0:
        result = 0.0
    return result + 0.0


def footprint_extents(width: float, length: float, scale: float = 1.0,
                      rotation: float = 0.0) -> Tuple[float, float]:
    """
    Half-extents along room x/z of a rotated, scaled rectangular footprint.

    Returns the half-width and half-length of the axis-aligned box that
    encloses the rotated footprint.
    """
    half_w = width * scale / 2
    half_l = length * scale / 2
    theta = math.radians(rotation)
    cos_t = abs(math.cos(theta))
    sin_t = abs(math.sin(theta))
    return half_w * cos_t + half_l * sin_t, half_w * sin_t + half_l * cos_t


def _clamp_axis(value: float, extent: float, half: float) -> float:
    low, high = half, extent - half
    if low > high:
        # Item is larger than the room on this axis
        return extent / 2
    return clamp(value, low, high)


def clamp_position(
    x: float,
    z: float,
    room_width: float,
    room_length: float,
    policy: ClampPolicy = ClampPolicy.CENTER_ONLY,
    half_extents: Tuple[float, float] = (0.0, 0.0)
) -> Tuple[float, float]:
    """
    Clamp a candidate centre position to the room.

    Args:
        x, z: Candidate centre in room-space metres
        room_width, room_length: Room size in metres
        policy: Which clamp to apply
        half_extents: Footprint half-extents, used by ClampPolicy.FOOTPRINT

    Returns:
        Clamped (x, z)
    """
    if ClampPolicy(policy) is ClampPolicy.CENTER_ONLY:
        return clamp(x, 0.0, room_width), clamp(z, 0.0, room_length)

    half_x, half_z = half_extents
    return _clamp_axis(x, room_width, half_x), _clamp_axis(z, room_length, half_z)
