from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional
import json
import logging

from ..db.connection import get_designs_db
from ..events import publish_saved, publish_deleted
from ..models import Envelope, Design, DesignCreate, DesignUpdate
from ..utils import new_id, utcnow

logger = logging.getLogger(__name__)

DESIGN_SELECT = """
    SELECT id, name, room_id, user_id, furniture, room_details, created_at, updated_at
    FROM designs
"""

router = APIRouter()


def row_to_design(row) -> Design:
    return Design(
        id=row[0],
        name=row[1],
        roomId=row[2],
        userId=row[3],
        furniture=json.loads(row[4]) if row[4] else [],
        roomDetails=json.loads(row[5]) if row[5] else None,
        createdAt=row[6],
        updatedAt=row[7]
    )


def load_design(design_id: str) -> Design:
    db = get_designs_db()
    row = db.execute(f"{DESIGN_SELECT} WHERE id = ?", [design_id]).fetchone()
    if not row:
        raise HTTPException(404, "Design not found")
    return row_to_design(row)


def _furniture_json(furniture) -> str:
    return json.dumps([f.model_dump() for f in furniture])


@router.get("/", response_model=Envelope[List[Design]], response_model_exclude_none=True)
def get_user_designs(userId: Optional[str] = Query(None)):
    if not userId:
        raise HTTPException(400, "User ID is required as a query parameter")
    db = get_designs_db()
    rows = db.execute(f"{DESIGN_SELECT} WHERE user_id = ? ORDER BY updated_at DESC", [userId]).fetchall()
    designs = [row_to_design(row) for row in rows]
    return Envelope(count=len(designs), data=designs)


@router.get("/{design_id}", response_model=Envelope[Design], response_model_exclude_none=True)
def get_design(design_id: str):
    return Envelope(data=load_design(design_id))


@router.post("/", response_model=Envelope[Design], status_code=201, response_model_exclude_none=True)
def create_design(design: DesignCreate):
    """
    Store a new design snapshot.

    The furniture list is stored in order; its positions are the indices the
    editing session uses.
    """
    db = get_designs_db()
    design_id = design.id or new_id()

    if db.execute("SELECT id FROM designs WHERE id = ?", [design_id]).fetchone():
        raise HTTPException(400, f"Design {design_id} already exists")

    now = utcnow()
    room_details = json.dumps(design.roomDetails.model_dump()) if design.roomDetails else None
    db.execute(
        """
        INSERT INTO designs (id, name, room_id, user_id, furniture, room_details, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [design_id, design.name, design.roomId, design.userId,
         _furniture_json(design.furniture), room_details, now, now]
    )

    logger.info(f"Created design {design_id} with {len(design.furniture)} placements")
    publish_saved("design", design_id)
    return Envelope(data=load_design(design_id))


@router.put("/{design_id}", response_model=Envelope[Design], response_model_exclude_none=True)
def update_design(design_id: str, design: DesignUpdate):
    db = get_designs_db()
    load_design(design_id)

    updates = []
    values = []

    if design.name is not None:
        updates.append("name = ?")
        values.append(design.name)
    if design.roomId is not None:
        updates.append("room_id = ?")
        values.append(design.roomId)
    if design.furniture is not None:
        updates.append("furniture = ?")
        values.append(_furniture_json(design.furniture))
    if design.roomDetails is not None:
        updates.append("room_details = ?")
        values.append(json.dumps(design.roomDetails.model_dump()))

    updates.append("updated_at = ?")
    values.extend([utcnow(), design_id])
    db.execute(f"UPDATE designs SET {', '.join(updates)} WHERE id = ?", values)

    publish_saved("design", design_id)
    return Envelope(data=load_design(design_id))


@router.delete("/{design_id}", response_model=Envelope[None], response_model_exclude_none=True)
def delete_design(design_id: str):
    db = get_designs_db()
    load_design(design_id)
    db.execute("DELETE FROM designs WHERE id = ?", [design_id])
    publish_deleted("design", design_id)
    return Envelope(message="Design deleted")
