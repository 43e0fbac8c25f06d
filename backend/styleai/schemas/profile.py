"""
Style profile schemas.

StyleProfileInput is the loosely-typed profile a client sends to the
recommendation pipeline; it coerces rather than rejects odd shapes so that a
stale or partial profile never blocks a suggestion. ProfileUpdate and
ProfileResponse back the stored profile.
"""
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Gender = Literal["male", "female", "unspecified"]

MAX_PREFERRED_COLORS = 10


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class StyleProfileInput(BaseModel):
    """Profile attributes as received by the pipeline (untrusted)"""
    model_config = ConfigDict(extra="ignore")

    gender: Optional[str] = None
    body_type: Optional[str] = None
    skin_tone: Optional[str] = None
    hair_color: Optional[str] = None
    hair_style: Optional[str] = None
    style_preference: Optional[str] = None
    preferred_colors: List[Any] = Field(default_factory=list)

    @field_validator("gender", "body_type", "skin_tone", "hair_color", "hair_style", "style_preference", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _str_or_none(v)

    @field_validator("preferred_colors", mode="before")
    @classmethod
    def coerce_colors(cls, v: Any) -> List[Any]:
        return list(v) if isinstance(v, (list, tuple)) else []


class ProfileAnalysis(BaseModel):
    """Physical attributes inferred from a profile photo"""
    gender: Gender = "unspecified"
    body_type: Optional[str] = None
    skin_tone: Optional[str] = None
    hair_color: Optional[str] = None
    hair_style: Optional[str] = None
    confidence: float = Field(0.0, ge=0, le=100)


class ProfileUpdate(BaseModel):
    """Editable profile fields"""
    full_name: Optional[str] = Field(None, max_length=100)
    gender: Optional[Gender] = None
    body_type: Optional[str] = Field(None, max_length=30)
    skin_tone: Optional[str] = Field(None, max_length=30)
    hair_color: Optional[str] = Field(None, max_length=30)
    hair_style: Optional[str] = Field(None, max_length=30)
    style_preference: Optional[str] = Field(None, max_length=50)
    preferred_colors: Optional[List[str]] = Field(None, max_length=MAX_PREFERRED_COLORS)


class ProfileResponse(BaseModel):
    """Stored profile"""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    full_name: Optional[str] = None
    gender: Gender = "unspecified"
    body_type: Optional[str] = None
    skin_tone: Optional[str] = None
    hair_color: Optional[str] = None
    hair_style: Optional[str] = None
    style_preference: Optional[str] = None
    preferred_colors: List[str] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @field_validator("preferred_colors", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> List[str]:
        return v or []


class AnalyzeProfileImageRequest(BaseModel):
    """Input for profile photo analysis"""
    model_config = ConfigDict(populate_by_name=True)

    image_base64: Any = Field(None, alias="imageBase64")


class AnalyzeProfileImageResponse(BaseModel):
    analysis: ProfileAnalysis


class ProfileAnalyzeResult(BaseModel):
    """Analysis merged into the stored profile"""
    analysis: ProfileAnalysis
    profile: ProfileResponse
