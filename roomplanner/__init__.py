"""Room layout and furniture placement."""

from .bounds import ClampPolicy, clamp_position, footprint_extents, normalize_rotation
from .errors import (DesignError, DegenerateScale, IndexOutOfRange, InvalidRoomDimension,
                     UnknownTemplateReference)
from .geometry import SCENE_TRANSFORM, Viewport, ViewTransform, resolve_scale
from .store import DesignSession

__all__ = [
    "ClampPolicy", "clamp_position", "footprint_extents", "normalize_rotation",
    "DesignError", "DegenerateScale", "IndexOutOfRange", "InvalidRoomDimension",
    "UnknownTemplateReference",
    "SCENE_TRANSFORM", "Viewport", "ViewTransform", "resolve_scale",
    "DesignSession",
]
