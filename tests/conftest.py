from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from roomplanner.db.connection import init_databases, close_databases
from roomplanner.models import FurnitureTemplate, Room
from roomplanner.store import DesignSession


CATALOG = [
    FurnitureTemplate(id="chair-1", name="Dining Chair", category="chair",
                      width=0.5, length=0.5, height=0.9, defaultColor="#8B4513"),
    FurnitureTemplate(id="table-1", name="Dining Table", category="table",
                      width=1.6, length=0.9, height=0.75, defaultColor="#DEB887"),
    FurnitureTemplate(id="sofa-1", name="Sofa", category="sofa",
                      width=2.0, length=0.8, height=0.85, defaultColor="#4682B4",
                      modelFormat="glb", glbModelPath="/models/sofa.glb"),
]


@pytest.fixture
def catalog() -> list[FurnitureTemplate]:
    return list(CATALOG)


@pytest.fixture
def room() -> Room:
    return Room(id="room-1", name="Living Room", width=5, length=5, height=3,
                wallColor="#FFFFFF", floorColor="#D2B48C", userId="user-42")


@pytest.fixture
def session(room, catalog) -> DesignSession:
    s = DesignSession(room)
    s.load_catalog(catalog)
    return s


@pytest.fixture
def db():
    init_databases(":memory:", ":memory:")
    yield
    close_databases()


@pytest.fixture
def api(db, tmp_path, monkeypatch):
    from roomplanner.main import app
    from roomplanner.routers import files, products

    models_dir = tmp_path / "models"
    thumbs_dir = tmp_path / "thumbnails"
    monkeypatch.setattr(files, "PRODUCT_MODELS", models_dir)
    monkeypatch.setattr(files, "PRODUCT_THUMBNAILS", thumbs_dir)
    monkeypatch.setattr(products, "PRODUCT_MODELS", models_dir)
    monkeypatch.setattr(products, "PRODUCT_THUMBNAILS", thumbs_dir)

    # No context manager: the lifespan would open the on-disk databases
    return TestClient(app)
