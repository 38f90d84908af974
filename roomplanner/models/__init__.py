from .room import Room, RoomDetails, RoomCreate, RoomUpdate
from .furniture import FurnitureTemplate, PlacedFurniture, ProductCreate, ProductUpdate
from .design import Design, DesignCreate, DesignUpdate
from .envelope import Envelope

__all__ = [
    "Room", "RoomDetails", "RoomCreate", "RoomUpdate",
    "FurnitureTemplate", "PlacedFurniture", "ProductCreate", "ProductUpdate",
    "Design", "DesignCreate", "DesignUpdate",
    "Envelope",
]
