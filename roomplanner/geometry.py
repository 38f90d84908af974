"""
Fit-to-viewport scale resolution and room <-> view coordinate mapping.

Room-space is metres with the origin at a room corner; x runs along the
room width and z along its length. View-space is whatever the rendering
backend uses: pixels for the 2D plan canvas (x right, z down), scene units
for the 3D scene graph, where the room corner sits at the scene origin and
one metre is one unit.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from .config import FIT_MARGIN
from .errors import DegenerateScale


class Viewport(NamedTuple):
    width: float
    height: float


@dataclass(frozen=True)
class ViewTransform:
    """Uniform scale plus origin offset from room-space into view-space."""
    scale: float
    origin_x: float = 0.0
    origin_z: float = 0.0

    def __post_init__(self):
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise DegenerateScale(f"Scale must be positive and finite, got {self.scale}")

    def to_view(self, x: float, z: float) -> Tuple[float, float]:
        return self.origin_x + x * self.scale, self.origin_z + z * self.scale

    def to_room(self, view_x: float, view_z: float) -> Tuple[float, float]:
        return (view_x - self.origin_x) / self.scale, (view_z - self.origin_z) / self.scale

    def length_to_view(self, metres: float) -> float:
        return metres * self.scale


# 3D scene backends place the room corner at the scene origin, 1 m == 1 unit
SCENE_TRANSFORM = ViewTransform(scale=1.0)


def resolve_scale(
    room_width: float,
    room_length: float,
    viewport: Optional[Viewport] = None,
    fit_margin: float = FIT_MARGIN
) -> ViewTransform:
    """
    Compute the transform that centres the scaled room in the viewport.

    Args:
        room_width: Room width in metres
        room_length: Room length in metres
        viewport: Viewport size in pixels, or None for a 1:1 scene backend
        fit_margin: Fraction of the limiting viewport axis the room may use

    Returns:
        ViewTransform with scale and origin offset

    Raises:
        DegenerateScale: If the room or viewport make the scale zero,
            negative or non-finite
    """
    if viewport is None:
        return SCENE_TRANSFORM

    if room_width <= 0 or room_length <= 0:
        raise DegenerateScale(f"Cannot fit a {room_width} x {room_length} room into a viewport")

    width, height = viewport
    scale = min(width / room_width, height / room_length) * fit_margin
    if not math.isfinite(scale) or scale <= 0:
        raise DegenerateScale(
            f"Viewport {width}x{height} gives scale {scale} for a {room_width} x {room_length} room"
        )

    return ViewTransform(
        scale=scale,
        origin_x=(width - room_width * scale) / 2,
        origin_z=(height - room_length * scale) / 2,
    )
