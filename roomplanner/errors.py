"""
Error kinds raised by the placement core.

All of them are recoverable: the caller decides whether to show a message,
revert an in-progress drag or ignore the failure.
"""


class DesignError(Exception):
    """Base exception for placement core operations."""
    pass


class InvalidRoomDimension(DesignError, ValueError):
    """Room width, length or height is not a positive finite number."""
    pass


class IndexOutOfRange(DesignError, IndexError):
    """Update or remove on a placement index that does not exist."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Placement index {index} out of range (0..{size - 1})" if size
                         else f"Placement index {index} out of range (no placements)")
        self.index = index
        self.size = size


class DegenerateScale(DesignError, ValueError):
    """Scale resolved to zero, a negative number or a non-finite value."""
    pass


class UnknownTemplateReference(DesignError, KeyError):
    """Template id is not present in the session catalog."""

    def __init__(self, template_id: str):
        super().__init__(template_id)
        self.template_id = template_id

    def __str__(self):
        return f"Unknown furniture template: {self.template_id}"
