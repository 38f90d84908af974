from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional
import logging

from ..db.connection import get_designs_db
from ..events import publish_saved, publish_deleted
from ..models import Envelope, Room, RoomCreate, RoomUpdate
from ..utils import build_update, new_id, utcnow

logger = logging.getLogger(__name__)

ROOM_SELECT = """
    SELECT id, name, width, length, height, wall_color, floor_color,
           user_id, created_at, updated_at
    FROM rooms
"""

ROOM_COLUMNS = {
    "name": "name",
    "width": "width",
    "length": "length",
    "height": "height",
    "wallColor": "wall_color",
    "floorColor": "floor_color",
}

router = APIRouter()


def row_to_room(row) -> Room:
    return Room(
        id=row[0],
        name=row[1],
        width=row[2],
        length=row[3],
        height=row[4],
        wallColor=row[5],
        floorColor=row[6],
        userId=row[7],
        createdAt=row[8],
        updatedAt=row[9]
    )


def load_room(room_id: str) -> Room:
    db = get_designs_db()
    row = db.execute(f"{ROOM_SELECT} WHERE id = ?", [room_id]).fetchone()
    if not row:
        raise HTTPException(404, "Room not found")
    return row_to_room(row)


@router.get("/", response_model=Envelope[List[Room]], response_model_exclude_none=True)
def get_user_rooms(userId: Optional[str] = Query(None)):
    if not userId:
        raise HTTPException(400, "User ID is required as a query parameter")
    db = get_designs_db()
    rows = db.execute(f"{ROOM_SELECT} WHERE user_id = ? ORDER BY created_at", [userId]).fetchall()
    rooms = [row_to_room(row) for row in rows]
    return Envelope(count=len(rooms), data=rooms)


@router.get("/{room_id}", response_model=Envelope[Room], response_model_exclude_none=True)
def get_room(room_id: str):
    return Envelope(data=load_room(room_id))


@router.post("/", response_model=Envelope[Room], status_code=201, response_model_exclude_none=True)
def create_room(room: RoomCreate):
    db = get_designs_db()
    room_id = room.id or new_id()
    if db.execute("SELECT id FROM rooms WHERE id = ?", [room_id]).fetchone():
        raise HTTPException(400, f"Room {room_id} already exists")

    now = utcnow()
    db.execute(
        """
        INSERT INTO rooms (id, name, width, length, height, wall_color, floor_color,
                           user_id, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [room_id, room.name, room.width, room.length, room.height,
         room.wallColor, room.floorColor, room.userId, now, now]
    )
    logger.info(f"Created room {room_id} for user {room.userId}")
    publish_saved("room", room_id)
    return Envelope(data=load_room(room_id))


@router.put("/{room_id}", response_model=Envelope[Room], response_model_exclude_none=True)
def update_room(room_id: str, room: RoomUpdate):
    db = get_designs_db()
    load_room(room_id)

    updates, values = build_update(room.model_dump(), ROOM_COLUMNS)
    updates.append("updated_at = ?")
    values.extend([utcnow(), room_id])
    db.execute(f"UPDATE rooms SET {', '.join(updates)} WHERE id = ?", values)

    publish_saved("room", room_id)
    return Envelope(data=load_room(room_id))


@router.delete("/{room_id}", response_model=Envelope[None], response_model_exclude_none=True)
def delete_room(room_id: str):
    db = get_designs_db()
    load_room(room_id)
    db.execute("DELETE FROM rooms WHERE id = ?", [room_id])
    publish_deleted("room", room_id)
    return Envelope(message="Room deleted")
