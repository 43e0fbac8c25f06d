"""
Clothing detection schemas.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class DetectedItem(BaseModel):
    """One clothing item found in a photo, anchored at its visual center.

    x and y are percentages of the image width/height; only a point is
    modeled, not a bounding box.
    """
    label: str
    category: str
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)
    color: Optional[str] = None
    style: Optional[str] = None


class DetectClothingRequest(BaseModel):
    image: Any = None


class DetectClothingResponse(BaseModel):
    items: List[DetectedItem]
