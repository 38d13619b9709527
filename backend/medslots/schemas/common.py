# backend/medslots/schemas/common.py

from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Response envelope: payload under `data`, optional human message."""
    message: Optional[str] = None
    data: T


class MessageResponse(BaseModel):
    message: str
