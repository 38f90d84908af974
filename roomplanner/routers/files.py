import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException, UploadFile, File, Form
from fastapi.responses import FileResponse

from ..config import PRODUCT_MODELS, PRODUCT_THUMBNAILS
from ..model_processor import ModelProcessor, SUPPORTED_FORMATS
from ..utils import IMAGE_EXTENSIONS, cleanup_image_files
from .products import load_product, apply_product_update

logger = logging.getLogger(__name__)

router = APIRouter()


def find_file(directory: Path, base_name: str, extensions: list) -> Path | None:
    for ext in extensions:
        path = directory / f"{base_name}.{ext}"
        if path.exists():
            return path
    return None


def file_extension(filename: str | None, default: str) -> str:
    if filename and '.' in filename:
        return filename.rsplit('.', 1)[-1].lower()
    return default


@router.post("/products/{product_id}/thumbnail")
async def upload_product_thumbnail(product_id: str, file: UploadFile = File(...)):
    load_product(product_id)

    ext = file_extension(file.filename, 'jpg')
    if ext not in IMAGE_EXTENSIONS:
        ext = 'jpg'

    # Remove any existing files with different extensions
    cleanup_image_files(PRODUCT_THUMBNAILS, product_id)

    PRODUCT_THUMBNAILS.mkdir(parents=True, exist_ok=True)
    path = PRODUCT_THUMBNAILS / f"{product_id}.{ext}"
    path.write_bytes(await file.read())

    thumbnail_url = f"/api/files/products/{product_id}/thumbnail"
    apply_product_update(product_id, {"thumbnailUrl": thumbnail_url})
    return {"success": True, "data": {"thumbnailUrl": thumbnail_url}}


@router.get("/products/{product_id}/thumbnail")
def get_product_thumbnail(product_id: str):
    path = find_file(PRODUCT_THUMBNAILS, product_id, IMAGE_EXTENSIONS)
    if not path:
        raise HTTPException(404, "Thumbnail not found")
    return FileResponse(path)


@router.post("/products/{product_id}/model")
async def upload_product_model(
    product_id: str,
    file: UploadFile = File(...),
    keepDimensions: bool = Form(False)
):
    """
    Upload a furniture model (GLB or OBJ).
    The model is recentered to bottom-center and stored as GLB. Its measured
    bounds replace the product dimensions unless keepDimensions is set.
    """
    load_product(product_id)

    file_type = file_extension(file.filename, 'glb')
    if file_type not in SUPPORTED_FORMATS:
        raise HTTPException(400, f"Unsupported model format: {file_type}")

    content = await file.read()
    processor = ModelProcessor()
    try:
        result = processor.process_model(content, file_type=file_type, generate_thumbnail=True)
    except ValueError as e:
        raise HTTPException(400, f"Invalid model: {e}")

    PRODUCT_MODELS.mkdir(parents=True, exist_ok=True)
    model_path = PRODUCT_MODELS / f"{product_id}.glb"
    model_path.write_bytes(result['glb'])

    model_url = f"/api/files/products/{product_id}/model"
    fields = {"modelFormat": "glb", "glbModelPath": model_url, "modelUrl": model_url}

    if result['thumbnail']:
        PRODUCT_THUMBNAILS.mkdir(parents=True, exist_ok=True)
        cleanup_image_files(PRODUCT_THUMBNAILS, product_id)
        (PRODUCT_THUMBNAILS / f"{product_id}.png").write_bytes(result['thumbnail'])
        fields["thumbnailUrl"] = f"/api/files/products/{product_id}/thumbnail"

    dimensions = result['dimensions']
    if not keepDimensions:
        if min(dimensions.values()) <= 0:
            logger.warning(f"Model for {product_id} is flat {dimensions}, keeping stored dimensions")
        else:
            fields.update(dimensions)

    apply_product_update(product_id, fields)
    logger.info(f"Stored model for product {product_id}: {dimensions}")

    return {"success": True, "data": load_product(product_id).model_dump(exclude_none=True)}


@router.get("/products/{product_id}/model")
def get_product_model(product_id: str):
    path = PRODUCT_MODELS / f"{product_id}.glb"
    if not path.exists():
        raise HTTPException(404, "Model not found")
    return FileResponse(path, media_type="model/gltf-binary")
