import os
from pathlib import Path

# Base paths
PACKAGE_DIR = Path(__file__).parent
DATA_DIR = Path(os.environ.get("ROOMPLANNER_DATA_DIR", PACKAGE_DIR / "data"))
STORAGE_DIR = DATA_DIR / "storage"

# Database paths
DESIGNS_DB = DATA_DIR / "designs.db"
CATALOG_DB = DATA_DIR / "catalog.db"

# Storage paths
PRODUCT_MODELS = STORAGE_DIR / "products" / "models"
PRODUCT_THUMBNAILS = STORAGE_DIR / "products" / "thumbnails"

# REST client
API_URL = os.environ.get("ROOMPLANNER_API_URL", "http://localhost:8000/api")
API_TIMEOUT = 30.0

LOG_LEVEL = os.environ.get("ROOMPLANNER_LOG_LEVEL", "info")

# Placement
FIT_MARGIN = 0.8  # fraction of the viewport the room may occupy
DEFAULT_VIEWPORT = (800, 600)
ROTATION_STEP = 15.0  # degrees per rotate-left/right step
CLAMP_POLICY = os.environ.get("ROOMPLANNER_CLAMP_POLICY", "clampCenterOnly")

DEFAULT_ROOM = {
    "name": "New Room",
    "width": 5.0,
    "length": 5.0,
    "height": 3.0,
    "wallColor": "#FFFFFF",
    "floorColor": "#D2B48C",
    "userId": "user1",
}


def ensure_directories():
    for path in [DATA_DIR, PRODUCT_MODELS, PRODUCT_THUMBNAILS]:
        path.mkdir(parents=True, exist_ok=True)
