from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..core.deps import get_current_user_id
from ..core.exceptions import NotFoundError
from ..database import get_db
from ..models import SavedOutfit
from ..schemas.outfit import SavedOutfitCreate, SavedOutfitResponse
from ..utils.sanitizer import sanitize

router = APIRouter(prefix="/saved-outfits", tags=["saved-outfits"])


@router.get("", response_model=List[SavedOutfitResponse])
def list_saved_outfits(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Saved looks, newest first"""
    return (
        db.query(SavedOutfit)
        .filter(SavedOutfit.user_id == user_id, SavedOutfit.is_saved.is_(True))
        .order_by(SavedOutfit.created_at.desc(), SavedOutfit.id.desc())
        .all()
    )


@router.post("", response_model=SavedOutfitResponse, status_code=201)
def save_outfit(
    payload: SavedOutfitCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Keep a generated suggestion; it is stored verbatim"""
    outfit = SavedOutfit(
        user_id=user_id,
        occasion=sanitize(payload.occasion, 200) or "casual everyday",
        suggestion_data=payload.suggestion.model_dump(mode="json"),
        is_saved=True,
    )
    db.add(outfit)
    db.commit()
    db.refresh(outfit)
    return outfit


@router.delete("/{outfit_id}", status_code=204)
def delete_saved_outfit(outfit_id: int, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    outfit = (
        db.query(SavedOutfit)
        .filter(SavedOutfit.id == outfit_id, SavedOutfit.user_id == user_id)
        .first()
    )
    if not outfit:
        raise NotFoundError("Saved outfit", outfit_id)
    db.delete(outfit)
    db.commit()
    return Response(status_code=204)
