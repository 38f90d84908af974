from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional
import logging

from ..config import PRODUCT_MODELS, PRODUCT_THUMBNAILS
from ..db.connection import get_catalog_db
from ..events import publish_saved, publish_deleted
from ..models import Envelope, FurnitureTemplate, ProductCreate, ProductUpdate
from ..utils import build_update, cleanup_image_files, new_id

logger = logging.getLogger(__name__)

router = APIRouter()

PRODUCT_SELECT = """
    SELECT id, name, category, width, length, height, color, default_color,
           model_format, model_url, thumbnail_url, obj_model_path, glb_model_path
    FROM products
"""

PRODUCT_COLUMNS = {
    "name": "name",
    "category": "category",
    "width": "width",
    "length": "length",
    "height": "height",
    "color": "color",
    "defaultColor": "default_color",
    "modelFormat": "model_format",
    "modelUrl": "model_url",
    "thumbnailUrl": "thumbnail_url",
    "objModelPath": "obj_model_path",
    "glbModelPath": "glb_model_path",
}

def row_to_product(row) -> FurnitureTemplate:
    return FurnitureTemplate(
        id=row[0],
        name=row[1],
        category=row[2],
        width=row[3],
        length=row[4],
        height=row[5],
        color=row[6],
        defaultColor=row[7],
        modelFormat=row[8] or "box",
        modelUrl=row[9],
        thumbnailUrl=row[10],
        objModelPath=row[11],
        glbModelPath=row[12]
    )

def load_product(product_id: str) -> FurnitureTemplate:
    db = get_catalog_db()
    row = db.execute(f"{PRODUCT_SELECT} WHERE id = ?", [product_id]).fetchone()
    if not row:
        raise HTTPException(404, "Product not found")
    return row_to_product(row)

def apply_product_update(product_id: str, fields: dict):
    """Write a partial update for an existing product."""
    updates, values = build_update(fields, PRODUCT_COLUMNS)
    if updates:
        values.append(product_id)
        get_catalog_db().execute(f"UPDATE products SET {', '.join(updates)} WHERE id = ?", values)
        publish_saved("product", product_id)

@router.get("/", response_model=Envelope[List[FurnitureTemplate]], response_model_exclude_none=True)
def get_all_products(category: Optional[str] = Query(None)):
    db = get_catalog_db()
    if category:
        rows = db.execute(f"{PRODUCT_SELECT} WHERE category = ? ORDER BY name", [category]).fetchall()
    else:
        rows = db.execute(f"{PRODUCT_SELECT} ORDER BY name").fetchall()
    products = [row_to_product(row) for row in rows]
    return Envelope(count=len(products), data=products)

@router.get("/{product_id}", response_model=Envelope[FurnitureTemplate], response_model_exclude_none=True)
def get_product(product_id: str):
    return Envelope(data=load_product(product_id))

@router.post("/", response_model=Envelope[FurnitureTemplate], status_code=201, response_model_exclude_none=True)
def create_product(product: ProductCreate):
    db = get_catalog_db()
    product_id = product.id or new_id()
    if db.execute("SELECT id FROM products WHERE id = ?", [product_id]).fetchone():
        raise HTTPException(400, f"Product {product_id} already exists")

    db.execute("""
        INSERT INTO products (id, name, category, width, length, height, color, default_color,
                              model_format, model_url, thumbnail_url, obj_model_path, glb_model_path)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, [product_id, product.name, product.category, product.width, product.length,
          product.height, product.color, product.defaultColor, product.modelFormat,
          product.modelUrl, product.thumbnailUrl, product.objModelPath, product.glbModelPath])

    logger.info(f"Created product {product_id} ({product.name})")
    publish_saved("product", product_id)
    return Envelope(data=load_product(product_id))

@router.put("/{product_id}", response_model=Envelope[FurnitureTemplate], response_model_exclude_none=True)
def update_product(product_id: str, product: ProductUpdate):
    load_product(product_id)
    apply_product_update(product_id, product.model_dump())
    return Envelope(data=load_product(product_id))

@router.delete("/{product_id}", response_model=Envelope[None], response_model_exclude_none=True)
def delete_product(product_id: str):
    load_product(product_id)
    get_catalog_db().execute("DELETE FROM products WHERE id = ?", [product_id])

    cleanup_image_files(PRODUCT_THUMBNAILS, product_id)
    (PRODUCT_MODELS / f"{product_id}.glb").unlink(missing_ok=True)

    publish_deleted("product", product_id)
    return Envelope(message="Product deleted")
