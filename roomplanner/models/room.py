from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class RoomDetails(BaseModel):
    width: float = Field(gt=0)
    length: float = Field(gt=0)
    height: float = Field(gt=0)
    wallColor: str
    floorColor: str

class Room(BaseModel):
    id: Optional[str] = None
    name: str = "New Room"
    width: float = 5.0
    length: float = 5.0
    height: float = 3.0
    wallColor: str = "#FFFFFF"
    floorColor: str = "#D2B48C"
    userId: str = "user1"
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    def details(self) -> RoomDetails:
        return RoomDetails(
            width=self.width,
            length=self.length,
            height=self.height,
            wallColor=self.wallColor,
            floorColor=self.floorColor,
        )

class RoomCreate(BaseModel):
    id: Optional[str] = None
    name: str
    width: float = Field(gt=0)
    length: float = Field(gt=0)
    height: float = Field(gt=0)
    wallColor: str
    floorColor: str
    userId: str

class RoomUpdate(BaseModel):
    name: Optional[str] = None
    width: Optional[float] = Field(default=None, gt=0)
    length: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    wallColor: Optional[str] = None
    floorColor: Optional[str] = None
