from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..config import settings
from ..core.deps import get_current_user_id, get_gateway
from ..database import get_db
from ..models import Profile, WardrobeItem
from ..reco.illustrator import OutfitIllustrator
from ..reco.normalizer import profile_gender
from ..reco.outfit_engine import OutfitEngine, resolve_occasion
from ..schemas.outfit import MySuggestRequest, OutfitSuggestion, SuggestOutfitRequest, SuggestOutfitResponse
from ..schemas.profile import StyleProfileInput
from ..schemas.wardrobe import WardrobeEntryInput
from ..utils.ai_gateway import AIGatewayClient
from ..utils.profiler import reset_profiler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["suggestions"])


def run_suggestion(
    gateway: AIGatewayClient,
    profile: Optional[StyleProfileInput],
    wardrobe: List[WardrobeEntryInput],
    occasion: Optional[str],
) -> OutfitSuggestion:
    """Recommend, then illustrate when enabled. Illustration failures never fail the request."""
    profiler = reset_profiler()

    suggestion = OutfitEngine(gateway).recommend(profile, wardrobe, occasion)

    if settings.ILLUSTRATE_OUTFITS:
        gender = profile_gender(profile)
        image = OutfitIllustrator(gateway).illustrate(suggestion, resolve_occasion(occasion), gender)
        if image:
            suggestion = suggestion.model_copy(update={"outfit_image": image})

    profiler.log_summary("[suggest-outfit] ")
    return suggestion


@router.post("/suggest-outfit", response_model=SuggestOutfitResponse)
def suggest_outfit(req: SuggestOutfitRequest, gateway: AIGatewayClient = Depends(get_gateway)):
    """
    Suggest one outfit for a profile, wardrobe and occasion.

    Every field is optional: an empty body yields a gender-neutral casual
    suggestion.
    """
    suggestion = run_suggestion(gateway, req.profile, req.wardrobe, req.occasion)
    return SuggestOutfitResponse(suggestion=suggestion)


@router.post("/me/suggest-outfit", response_model=SuggestOutfitResponse)
def suggest_outfit_for_me(
    req: MySuggestRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_gateway),
):
    """Suggest an outfit from the caller's stored profile and wardrobe"""
    stored = db.query(Profile).filter(Profile.user_id == user_id).first()
    profile = StyleProfileInput.model_validate(stored.to_pipeline_dict()) if stored else None

    items = (
        db.query(WardrobeItem)
        .filter(WardrobeItem.user_id == user_id)
        .order_by(WardrobeItem.is_favorite.desc(), WardrobeItem.created_at.desc())
        .all()
    )
    wardrobe = [WardrobeEntryInput(name=i.name, category=i.category, color=i.color) for i in items]

    suggestion = run_suggestion(gateway, profile, wardrobe, req.occasion)
    return SuggestOutfitResponse(suggestion=suggestion)
