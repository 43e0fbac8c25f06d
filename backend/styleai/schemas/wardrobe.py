"""
Wardrobe item schemas.
"""
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

WardrobeCategory = Literal['shirt', 'pants', 'jacket', 'dress', 'shoes', 'accessories', 'cap']


class WardrobeEntryInput(BaseModel):
    """Wardrobe item as received by the recommendation pipeline (untrusted)"""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name", "category", "color", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class WardrobeItemBase(BaseModel):
    """Base schema for wardrobe items"""
    name: str = Field(..., min_length=1, max_length=100, description="Item name (e.g., Oxford shirt)")
    category: WardrobeCategory = Field(..., description="Categorization for outfit building")
    color: str = Field(..., min_length=1, max_length=50, description="Primary color of the item")
    brand: Optional[str] = Field(None, max_length=100)
    size: Optional[str] = Field(None, max_length=20)
    image_url: Optional[str] = Field(None, description="Image URL or base64 data URL to upload")
    is_favorite: bool = False


class WardrobeItemCreate(WardrobeItemBase):
    """Schema for creating a new wardrobe item"""
    pass


class WardrobeItemUpdate(BaseModel):
    """Schema for updating a wardrobe item; omitted fields are left alone"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[WardrobeCategory] = None
    color: Optional[str] = Field(None, min_length=1, max_length=50)
    brand: Optional[str] = Field(None, max_length=100)
    size: Optional[str] = Field(None, max_length=20)
    image_url: Optional[str] = None
    is_favorite: Optional[bool] = None


class WardrobeItem(WardrobeItemBase):
    """Wardrobe item with ID"""
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Oxford shirt",
                "category": "shirt",
                "color": "light blue",
                "image_url": "https://images.unsplash.com/photo-1596755094514-f87e34085b2c",
                "is_favorite": False,
            }
        },
    )

    id: int = Field(..., description="Unique identifier for the item")
    created_at: Optional[datetime] = None


class WardrobeStats(BaseModel):
    """Dashboard counts"""
    total: int
    shirts: int
    pants: int
    other: int
