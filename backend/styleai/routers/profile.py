from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.deps import get_current_user_id, get_gateway
from ..database import get_db
from ..models import Profile
from ..schemas.profile import AnalyzeProfileImageRequest, ProfileAnalyzeResult, ProfileResponse, ProfileUpdate
from ..utils.ai_gateway import AIGatewayClient
from ..utils.image_analyzer import ProfileImageAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])

ANALYZED_FIELDS = ("gender", "body_type", "skin_tone", "hair_color", "hair_style")


def get_or_create_profile(db: Session, user_id: str) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is None:
        profile = Profile(user_id=user_id, gender="unspecified", preferred_colors=[])
        db.add(profile)
        db.commit()
        db.refresh(profile)
    return profile


@router.get("", response_model=ProfileResponse)
def get_profile(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Get the caller's style profile, creating an empty one on first access"""
    return get_or_create_profile(db, user_id)


@router.put("", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Update profile fields; omitted fields are left unchanged"""
    profile = get_or_create_profile(db, user_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "preferred_colors":
            value = [c.strip() for c in (value or []) if c and c.strip()]
        if field == "gender" and value is None:
            value = "unspecified"
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile


@router.post("/analyze", response_model=ProfileAnalyzeResult)
def analyze_and_update_profile(
    req: AnalyzeProfileImageRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
):
    """
    Analyze a profile photo and merge the detected attributes into the
    stored profile. Attributes the model could not determine keep their
    stored values.
    """
    analysis = ProfileImageAnalyzer(gateway).analyze(req.image_base64)

    profile = get_or_create_profile(db, user_id)
    for field in ANALYZED_FIELDS:
        value = getattr(analysis, field)
        if field == "gender" and value == "unspecified":
            continue
        if value:
            setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    logger.info(f"Profile updated from photo analysis (confidence {analysis.confidence:.0f})")

    return ProfileAnalyzeResult(analysis=analysis, profile=ProfileResponse.model_validate(profile))
