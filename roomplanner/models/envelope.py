from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

class Envelope(BaseModel, Generic[T]):
    """Response wrapper shared by every JSON route: {success, data|message}."""
    success: bool = True
    count: Optional[int] = None
    data: Optional[T] = None
    message: Optional[str] = None
