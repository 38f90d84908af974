from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from .furniture import PlacedFurniture
from .room import RoomDetails

class Design(BaseModel):
    id: Optional[str] = None
    name: str
    roomId: str
    userId: str
    furniture: List[PlacedFurniture] = Field(default_factory=list)
    roomDetails: Optional[RoomDetails] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

class DesignCreate(BaseModel):
    id: Optional[str] = None
    name: str
    roomId: str
    userId: str
    furniture: List[PlacedFurniture] = Field(default_factory=list)
    roomDetails: Optional[RoomDetails] = None

class DesignUpdate(BaseModel):
    name: Optional[str] = None
    roomId: Optional[str] = None
    furniture: Optional[List[PlacedFurniture]] = None
    roomDetails: Optional[RoomDetails] = None
