"""
Outfit and suggestion schemas.

OutfitSuggestion is the fixed-shape contract of the recommendation engine.
It is validated strictly: a model response that does not satisfy it is
replaced wholesale by the fallback suggestion, never patched.
"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from .profile import StyleProfileInput
from .wardrobe import WardrobeEntryInput

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class OutfitPieces(BaseModel):
    """The garments making up one outfit"""
    top: NonEmptyStr
    bottom: NonEmptyStr
    outerwear: Optional[str] = None
    shoes: NonEmptyStr
    accessories: Optional[str] = None

    @field_validator("outerwear", "accessories", mode="before")
    @classmethod
    def optional_piece(cls, v: Any) -> Any:
        return _blank_to_none(v)


class OutfitAlternatives(BaseModel):
    top: NonEmptyStr
    bottom: NonEmptyStr


class OutfitSuggestion(BaseModel):
    """Structured outfit recommendation"""
    outfit: OutfitPieces
    explanation: NonEmptyStr
    styling_tips: List[NonEmptyStr] = Field(..., min_length=1)
    color_harmony: NonEmptyStr
    alternatives: Optional[OutfitAlternatives] = None
    outfit_image: Optional[str] = None
    # Model-supplied illustration prompt; consumed internally, never serialized
    image_prompt: Optional[str] = Field(None, exclude=True)

    @field_validator("alternatives", mode="before")
    @classmethod
    def drop_partial_alternatives(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return None
        top, bottom = v.get("top"), v.get("bottom")
        if not (isinstance(top, str) and top.strip() and isinstance(bottom, str) and bottom.strip()):
            return None
        return v

    @field_validator("image_prompt", mode="before")
    @classmethod
    def ignore_bad_prompt(cls, v: Any) -> Any:
        return v if isinstance(v, str) and v.strip() else None


class SuggestOutfitRequest(BaseModel):
    """Input for the suggest-outfit pipeline"""
    profile: Optional[StyleProfileInput] = None
    wardrobe: List[WardrobeEntryInput] = Field(default_factory=list)
    occasion: Optional[str] = None

    @field_validator("profile", mode="before")
    @classmethod
    def coerce_profile(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @field_validator("wardrobe", mode="before")
    @classmethod
    def coerce_wardrobe(cls, v: Any) -> List[Any]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @field_validator("occasion", mode="before")
    @classmethod
    def coerce_occasion(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class MySuggestRequest(BaseModel):
    """Suggest for the caller's stored profile and wardrobe"""
    occasion: Optional[str] = Field(None, max_length=200)


class SuggestOutfitResponse(BaseModel):
    suggestion: OutfitSuggestion


class SavedOutfitCreate(BaseModel):
    """Schema for saving a generated suggestion"""
    occasion: str = Field(..., min_length=1, max_length=200)
    suggestion: OutfitSuggestion


class SavedOutfitResponse(BaseModel):
    """Schema for saved outfit response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    occasion: str
    suggestion_data: Dict[str, Any]
    is_saved: bool = True
    created_at: Optional[datetime] = None
