from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal
from uuid import uuid4

FurnitureCategory = Literal["chair", "table", "sofa", "bed", "cabinet", "other"]
ModelFormat = Literal["box", "obj", "glb"]

class FurnitureTemplate(BaseModel):
    """Catalog entry. Frozen so a loaded catalog cannot be edited in place."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: FurnitureCategory = "other"
    width: float
    length: float
    height: float
    color: Optional[str] = None
    defaultColor: str = "#8B4513"
    modelFormat: ModelFormat = "box"
    modelUrl: Optional[str] = None
    thumbnailUrl: Optional[str] = None
    objModelPath: Optional[str] = None
    glbModelPath: Optional[str] = None

    @property
    def model_path(self) -> Optional[str]:
        if self.modelFormat == "glb":
            return self.glbModelPath or self.modelUrl
        if self.modelFormat == "obj":
            return self.objModelPath or self.modelUrl
        return None

class PlacedFurniture(BaseModel):
    """One furniture instance in the room. Replaced, never mutated."""
    model_config = ConfigDict(frozen=True)

    placementId: str = Field(default_factory=lambda: uuid4().hex)
    furnitureId: str
    x: float
    y: float = 0.0
    z: float
    rotation: float = 0.0  # degrees
    scale: float = Field(default=1.0, gt=0)
    color: str
    shade: float = Field(default=0.0, ge=0, le=100)
    roughness: Optional[float] = Field(default=None, ge=0, le=1)
    metalness: Optional[float] = Field(default=None, ge=0, le=1)

class ProductCreate(BaseModel):
    id: Optional[str] = None
    name: str
    category: FurnitureCategory
    width: float = Field(gt=0)
    length: float = Field(gt=0)
    height: float = Field(gt=0)
    color: str
    defaultColor: str
    modelFormat: ModelFormat = "box"
    modelUrl: Optional[str] = None
    thumbnailUrl: Optional[str] = None
    objModelPath: Optional[str] = None
    glbModelPath: Optional[str] = None

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[FurnitureCategory] = None
    width: Optional[float] = Field(default=None, gt=0)
    length: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    color: Optional[str] = None
    defaultColor: Optional[str] = None
    modelFormat: Optional[ModelFormat] = None
    modelUrl: Optional[str] = None
    thumbnailUrl: Optional[str] = None
    objModelPath: Optional[str] = None
    glbModelPath: Optional[str] = None
