"""
Placement store: the single owned state object of an editing session.

A DesignSession holds the active room, the read-only furniture catalog and
the ordered list of placed furniture. Render adapters observe it through
subscribe() and request changes only through its operations. Placement
records are immutable; every mutation replaces the record at its index.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from .bounds import ClampPolicy, clamp_position, footprint_extents, normalize_rotation
from .config import CLAMP_POLICY, DEFAULT_ROOM, DEFAULT_VIEWPORT, ROTATION_STEP
from .errors import IndexOutOfRange, InvalidRoomDimension, UnknownTemplateReference
from .geometry import Viewport, ViewTransform, resolve_scale
from .models import Design, FurnitureTemplate, PlacedFurniture, Room

logger = logging.getLogger(__name__)

Listener = Callable[[str, "DesignSession"], None]

# Fields a caller may never overwrite through update_furniture
_IMMUTABLE_FIELDS = {"placementId", "furnitureId"}

_CLAMPED_FIELDS = {"x", "z", "scale", "rotation"}


def validate_room(room: Room):
    for field in ("width", "length", "height"):
        value = getattr(room, field)
        if not math.isfinite(value) or value <= 0:
            raise InvalidRoomDimension(f"Room {field} must be positive, got {value}")


class DesignSession:
    """In-memory editing session for one room and its furniture."""

    def __init__(self, room: Optional[Room] = None, clamp_policy: str = CLAMP_POLICY):
        room = room or Room(**DEFAULT_ROOM)
        validate_room(room)
        self._room = room
        self._catalog: Dict[str, FurnitureTemplate] = {}
        self._placed: List[PlacedFurniture] = []
        self._design: Optional[Design] = None
        self._viewport: Optional[Viewport] = Viewport(*DEFAULT_VIEWPORT)
        self._listeners: List[Listener] = []
        self.clamp_policy = ClampPolicy(clamp_policy)

    # ============ Observers ============

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str):
        for listener in list(self._listeners):
            listener(event, self)

    # ============ Catalog ============

    def load_catalog(self, items: Iterable[FurnitureTemplate]):
        self._catalog = {item.id: item for item in items}
        logger.info(f"Loaded catalog with {len(self._catalog)} templates")
        self._notify("catalog")

    @property
    def catalog(self) -> Tuple[FurnitureTemplate, ...]:
        return tuple(self._catalog.values())

    def get_template(self, template_id: str) -> FurnitureTemplate:
        template = self._catalog.get(template_id)
        if template is None:
            raise UnknownTemplateReference(template_id)
        return template

    def find_template(self, template_id: str) -> Optional[FurnitureTemplate]:
        return self._catalog.get(template_id)

    # ============ Room ============

    def set_room(self, room: Room):
        validate_room(room)
        self._room = room
        logger.info(f"Room set to {room.width} x {room.length} x {room.height} m")
        self._notify("room")

    def get_room(self) -> Room:
        return self._room

    # ============ Placements ============

    def get_placed_furniture(self) -> Tuple[PlacedFurniture, ...]:
        return tuple(self._placed)

    def get_placement(self, index: int) -> PlacedFurniture:
        self._check_index(index)
        return self._placed[index]

    def index_of(self, placement_id: str) -> Optional[int]:
        for index, record in enumerate(self._placed):
            if record.placementId == placement_id:
                return index
        return None

    def _check_index(self, index: int):
        # Negative indices are rejected rather than counted from the end
        if not 0 <= index < len(self._placed):
            raise IndexOutOfRange(index, len(self._placed))

    def add_furniture(self, template_id: str) -> None:
        """Append a new placement of the template at the room centre."""
        template = self.get_template(template_id)
        record = PlacedFurniture(
            furnitureId=template.id,
            x=self._room.width / 2,
            y=0.0,
            z=self._room.length / 2,
            rotation=0.0,
            scale=1.0,
            color=template.defaultColor,
            shade=0.0,
        )
        self._placed.append(record)
        logger.info(f"Added {template.name} at index {len(self._placed) - 1}")
        self._notify("placements")

    def update_furniture(self, index: int, fields: dict) -> None:
        """
        Merge fields into the placement at index.

        Whenever x, z, scale or rotation change, the position is clamped to
        the room under the session clamp policy. Rotation is normalized into
        [0, 360). Nothing is changed when the
        index is out of range or any field is rejected.
        """
        self._check_index(index)

        unknown = set(fields) - set(PlacedFurniture.model_fields)
        if unknown:
            raise ValueError(f"Unknown placement fields: {sorted(unknown)}")
        immutable = set(fields) & _IMMUTABLE_FIELDS
        if immutable:
            raise ValueError(f"Placement fields cannot be changed: {sorted(immutable)}")

        current = self._placed[index]
        merged = {**current.model_dump(), **fields}
        try:
            record = PlacedFurniture.model_validate(merged)
        except ValidationError as e:
            raise ValueError(f"Invalid placement update: {e}") from e

        if "rotation" in fields:
            record = record.model_copy(update={"rotation": normalize_rotation(record.rotation)})
        # scale and rotation change the footprint, so they re-clamp too
        if _CLAMPED_FIELDS & set(fields):
            x, z = self._clamp(record, record.x, record.z)
            record = record.model_copy(update={"x": x, "z": z})

        self._placed[index] = record
        logger.debug(f"Updated placement {index}: {sorted(fields)}")
        self._notify("placements")

    def remove_furniture(self, index: int) -> None:
        """Delete the placement at index; later placements shift down by one."""
        self._check_index(index)
        record = self._placed.pop(index)
        logger.info(f"Removed placement {index} ({record.furnitureId})")
        self._notify("placements")

    def rotate_furniture(self, index: int, delta: float = ROTATION_STEP) -> float:
        """Rotate by delta degrees and return the stored, normalized rotation."""
        current = self.get_placement(index)
        self.update_furniture(index, {"rotation": current.rotation + delta})
        return self._placed[index].rotation

    def preview_position(self, index: int, x: float, z: float) -> Tuple[float, float]:
        """Clamp a candidate position for the placement without committing it."""
        return self._clamp(self.get_placement(index), x, z)

    def _clamp(self, record: PlacedFurniture, x: float, z: float) -> Tuple[float, float]:
        half_extents = (0.0, 0.0)
        if self.clamp_policy is ClampPolicy.FOOTPRINT:
            template = self.find_template(record.furnitureId)
            if template is None:
                logger.warning(f"No template {record.furnitureId} for footprint clamp, clamping centre only")
            else:
                half_extents = footprint_extents(
                    template.width, template.length, record.scale, record.rotation
                )
        return clamp_position(
            x, z, self._room.width, self._room.length, self.clamp_policy, half_extents
        )

    def unresolved_placements(self) -> List[int]:
        """Indices of placements whose template is missing from the catalog."""
        return [i for i, record in enumerate(self._placed) if record.furnitureId not in self._catalog]

    def reset(self):
        """Drop all placements and the bound design. Room and catalog are kept."""
        self._placed = []
        self._design = None
        self._notify("placements")
        self._notify("design")

    # ============ View mapping ============

    def resolve_scale(self, viewport: Optional[Viewport] = DEFAULT_VIEWPORT) -> ViewTransform:
        """
        Resolve the transform for a viewport (None for a 1:1 scene).

        The viewport is remembered for to_view/to_room; the transform itself
        is recomputed on every call so room changes are always picked up.
        """
        if viewport is not None:
            viewport = Viewport(*viewport)
        self._viewport = viewport
        return resolve_scale(self._room.width, self._room.length, viewport)

    @property
    def view_transform(self) -> ViewTransform:
        return resolve_scale(self._room.width, self._room.length, self._viewport)

    def to_view(self, coord: Tuple[float, float]) -> Tuple[float, float]:
        return self.view_transform.to_view(*coord)

    def to_room(self, coord: Tuple[float, float]) -> Tuple[float, float]:
        return self.view_transform.to_room(*coord)

    # ============ Designs ============

    @property
    def current_design(self) -> Optional[Design]:
        return self._design

    def bind_design(self, design: Optional[Design]):
        """Make design the one later snapshots overwrite (e.g. after a save)."""
        self._design = design
        self._notify("design")

    def serialize_design(self, name: str) -> Design:
        """Snapshot the room and placements as a Design and bind it."""
        now = datetime.now(timezone.utc)
        current = self._design
        design = Design(
            id=current.id if current else None,
            name=name,
            roomId=self._room.id or "temp-room-id",
            userId=self._room.userId,
            furniture=list(self._placed),
            roomDetails=self._room.details(),
            createdAt=current.createdAt if current and current.createdAt else now,
            updatedAt=now,
        )
        self.bind_design(design)
        return design

    def load_design(self, design: Design):
        """Replace the session contents with a saved design."""
        room = self._room
        if design.roomDetails is not None:
            room = room.model_copy(update={
                **design.roomDetails.model_dump(),
                "id": design.roomId,
                "userId": design.userId,
            })
            validate_room(room)

        self._room = room
        self._placed = list(design.furniture)
        self._design = design

        missing = self.unresolved_placements()
        if missing:
            logger.warning(f"Design {design.id} references unknown templates at indices {missing}")
        logger.info(f"Loaded design {design.id} with {len(self._placed)} placements")

        self._notify("room")
        self._notify("placements")
        self._notify("design")
