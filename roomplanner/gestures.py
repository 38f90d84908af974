"""
Two-phase drag: cheap previews while the pointer moves, one commit at the end.
"""

import logging
from typing import Optional, Tuple

from .errors import IndexOutOfRange
from .geometry import ViewTransform

logger = logging.getLogger(__name__)


class DragGesture:
    """
    A drag of one placement, expressed in a backend's view-space.

    move() never touches the store; commit() issues exactly one
    update_furniture call. The placement is tracked by its placementId, so a
    removal elsewhere in the list during the drag still commits to the
    dragged record.
    """

    def __init__(self, session, index: int, transform: ViewTransform):
        record = session.get_placement(index)
        self.session = session
        self.transform = transform
        self.placement_id = record.placementId
        self.start = (record.x, record.z)
        self.position = self.start
        self.finished = False

    def _check_active(self):
        if self.finished:
            raise RuntimeError("Drag gesture already finished")

    def _current_index(self) -> int:
        index = self.session.index_of(self.placement_id)
        if index is None:
            raise IndexOutOfRange(-1, len(self.session.get_placed_furniture()))
        return index

    def move(self, view_x: float, view_z: float) -> Tuple[float, float]:
        """Preview a pointer position; returns the clamped room coordinate."""
        self._check_active()
        x, z = self.transform.to_room(view_x, view_z)
        self.position = self.session.preview_position(self._current_index(), x, z)
        return self.position

    def preview_view_position(self) -> Tuple[float, float]:
        """Clamped preview position mapped back into view-space."""
        return self.transform.to_view(*self.position)

    def commit(self, rotation: Optional[float] = None) -> int:
        """Store the last previewed position. Returns the record's index."""
        self._check_active()
        self.finished = True
        index = self._current_index()
        fields = {"x": self.position[0], "z": self.position[1]}
        if rotation is not None:
            fields["rotation"] = rotation
        self.session.update_furniture(index, fields)
        logger.debug(f"Committed drag of placement {index} to {self.position}")
        return index

    def cancel(self):
        """End the drag without changing the store."""
        self._check_active()
        self.finished = True
        self.position = self.start
