"""
Backend-neutral render adapters for the 2D plan canvas and the 3D scene.

Each adapter turns the session state into plain primitives a drawing
library can consume directly. Both resolve positions through the shared
ViewTransform so the same placement lands on the same room-space spot in
either view.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import DEFAULT_VIEWPORT
from .errors import UnknownTemplateReference
from .geometry import SCENE_TRANSFORM, Viewport, ViewTransform, resolve_scale
from .gestures import DragGesture

logger = logging.getLogger(__name__)

ROOM_STROKE_WIDTH = 10


# ============ 2D plan ============

@dataclass
class RoomRect:
    left: float
    top: float
    width: float
    height: float
    fill: str
    stroke: str
    strokeWidth: float = ROOM_STROKE_WIDTH


@dataclass
class PlanRect:
    """Furniture rectangle with a centre origin, as the canvas draws it."""
    index: int
    placementId: str
    left: float
    top: float
    width: float
    height: float
    angle: float
    fill: str


@dataclass
class PlanFrame:
    transform: ViewTransform
    room: RoomRect
    items: List[PlanRect] = field(default_factory=list)
    skipped: List[UnknownTemplateReference] = field(default_factory=list)


class PlanViewAdapter:
    def __init__(self, session, viewport: Viewport = DEFAULT_VIEWPORT):
        self.session = session
        self.viewport = Viewport(*viewport)

    def resize(self, viewport: Viewport):
        self.viewport = Viewport(*viewport)

    @property
    def transform(self) -> ViewTransform:
        room = self.session.get_room()
        return resolve_scale(room.width, room.length, self.viewport)

    def render(self) -> PlanFrame:
        room = self.session.get_room()
        transform = self.transform
        left, top = transform.to_view(0.0, 0.0)
        frame = PlanFrame(
            transform=transform,
            room=RoomRect(
                left=left,
                top=top,
                width=transform.length_to_view(room.width),
                height=transform.length_to_view(room.length),
                fill=room.floorColor,
                stroke=room.wallColor,
            ),
        )

        for index, item in enumerate(self.session.get_placed_furniture()):
            template = self.session.find_template(item.furnitureId)
            if template is None:
                logger.warning(f"Skipping placement {index}: unknown template {item.furnitureId}")
                frame.skipped.append(UnknownTemplateReference(item.furnitureId))
                continue

            view_x, view_z = transform.to_view(item.x, item.z)
            frame.items.append(PlanRect(
                index=index,
                placementId=item.placementId,
                left=view_x,
                top=view_z,
                width=transform.length_to_view(template.width * item.scale),
                height=transform.length_to_view(template.length * item.scale),
                angle=item.rotation,
                fill=item.color,
            ))

        return frame

    def room_position(self, rect: PlanRect) -> Tuple[float, float]:
        """Room-space centre of a drawn rectangle."""
        return self.transform.to_room(rect.left, rect.top)

    def begin_drag(self, index: int) -> DragGesture:
        return DragGesture(self.session, index, self.transform)


# ============ 3D scene ============

@dataclass
class RoomBox:
    width: float
    length: float
    height: float
    wallColor: str
    floorColor: str


@dataclass
class SceneNode:
    index: int
    placementId: str
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float]  # radians, rotation about Y only
    scale: Tuple[float, float, float]
    dimensions: Tuple[float, float, float]  # width, height, length
    color: str
    modelFormat: str
    modelPath: Optional[str] = None
    roughness: Optional[float] = None
    metalness: Optional[float] = None


@dataclass
class SceneFrame:
    room: RoomBox
    nodes: List[SceneNode] = field(default_factory=list)
    skipped: List[UnknownTemplateReference] = field(default_factory=list)


class SceneAdapter:
    transform = SCENE_TRANSFORM

    def __init__(self, session):
        self.session = session

    def render(self) -> SceneFrame:
        room = self.session.get_room()
        frame = SceneFrame(room=RoomBox(
            width=room.width,
            length=room.length,
            height=room.height,
            wallColor=room.wallColor,
            floorColor=room.floorColor,
        ))

        for index, item in enumerate(self.session.get_placed_furniture()):
            template = self.session.find_template(item.furnitureId)
            if template is None:
                logger.warning(f"Skipping placement {index}: unknown template {item.furnitureId}")
                frame.skipped.append(UnknownTemplateReference(item.furnitureId))
                continue

            x, z = self.transform.to_view(item.x, item.z)
            # Models are anchored at their centre, lift them to stand on the floor
            y = item.y + template.height * item.scale / 2
            frame.nodes.append(SceneNode(
                index=index,
                placementId=item.placementId,
                position=(x, y, z),
                rotation=(0.0, math.radians(item.rotation), 0.0),
                scale=(item.scale, item.scale, item.scale),
                dimensions=(template.width, template.height, template.length),
                color=item.color,
                modelFormat=template.modelFormat,
                modelPath=template.model_path,
                roughness=item.roughness,
                metalness=item.metalness,
            ))

        return frame

    def room_position(self, node: SceneNode) -> Tuple[float, float]:
        return self.transform.to_room(node.position[0], node.position[2])

    def begin_drag(self, index: int) -> DragGesture:
        return DragGesture(self.session, index, self.transform)
