from fastapi import APIRouter, Depends, Query, Response
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.deps import get_current_user_id
from ..core.exceptions import NotFoundError
from ..database import get_db
from ..models import WardrobeItem as WardrobeItemModel
from ..schemas.wardrobe import (
    WardrobeCategory,
    WardrobeItem as WardrobeItemSchema,
    WardrobeItemCreate,
    WardrobeItemUpdate,
    WardrobeStats,
)
from ..utils.cloudinary_helper import delete_image_from_cloudinary, store_wardrobe_image

router = APIRouter(prefix="/wardrobe", tags=["wardrobe"])


def _get_owned_item(db: Session, user_id: str, item_id: int) -> WardrobeItemModel:
    item = (
        db.query(WardrobeItemModel)
        .filter(WardrobeItemModel.id == item_id, WardrobeItemModel.user_id == user_id)
        .first()
    )
    if not item:
        raise NotFoundError("Wardrobe item", item_id)
    return item


@router.get("", response_model=List[WardrobeItemSchema])
def get_wardrobe_items(
    response: Response,
    category: Optional[WardrobeCategory] = Query(None, description="Only items in this category"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Get the caller's wardrobe, newest first.
    """
    query = db.query(WardrobeItemModel).filter(WardrobeItemModel.user_id == user_id)
    if category:
        query = query.filter(WardrobeItemModel.category == category)

    items = query.order_by(WardrobeItemModel.created_at.desc(), WardrobeItemModel.id.desc()).all()
    response.headers["X-Total-Count"] = str(len(items))
    return [item.to_dict() for item in items]


# Specific routes must come before parameterized routes like /{item_id}
@router.get("/stats", response_model=WardrobeStats)
def get_wardrobe_stats(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Counts for the dashboard: total, shirts, pants and everything else"""
    rows = (
        db.query(WardrobeItemModel.category, func.count(WardrobeItemModel.id))
        .filter(WardrobeItemModel.user_id == user_id)
        .group_by(WardrobeItemModel.category)
        .all()
    )
    counts = dict(rows)
    total = sum(counts.values())
    shirts = counts.get("shirt", 0)
    pants = counts.get("pants", 0)
    return WardrobeStats(total=total, shirts=shirts, pants=pants, other=total - shirts - pants)


@router.post("", response_model=WardrobeItemSchema, status_code=201)
def create_wardrobe_item(
    payload: WardrobeItemCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Add a new item to the wardrobe. Data-URL images are uploaded to
    Cloudinary when it is configured; otherwise the URL is stored as given.
    """
    stored = store_wardrobe_image(payload.image_url, tags=["wardrobe", payload.category])

    new_item = WardrobeItemModel(
        user_id=user_id,
        name=payload.name.strip(),
        category=payload.category,
        color=payload.color.strip(),
        brand=payload.brand,
        size=payload.size,
        image_url=stored["url"],
        cloudinary_id=stored["public_id"],
        is_favorite=payload.is_favorite,
    )
    db.add(new_item)
    db.commit()
    db.refresh(new_item)
    return new_item.to_dict()


@router.patch("/{item_id}", response_model=WardrobeItemSchema)
def update_wardrobe_item(
    item_id: int,
    payload: WardrobeItemUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Update a wardrobe item by ID
    """
    item = _get_owned_item(db, user_id, item_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    new_image = changes.pop("image_url", None)
    if new_image and new_image != item.image_url:
        stored = store_wardrobe_image(new_image, tags=["wardrobe", changes.get("category", item.category)])
        # The old upload is no longer referenced once the URL changes
        if item.cloudinary_id:
            delete_image_from_cloudinary(item.cloudinary_id)
        item.image_url = stored["url"]
        item.cloudinary_id = stored["public_id"]

    for field, value in changes.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return item.to_dict()


@router.post("/{item_id}/favorite", response_model=WardrobeItemSchema)
def toggle_favorite(item_id: int, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Flip the favorite flag"""
    item = _get_owned_item(db, user_id, item_id)
    item.is_favorite = not item.is_favorite
    db.commit()
    db.refresh(item)
    return item.to_dict()


@router.delete("/{item_id}", status_code=204)
def delete_wardrobe_item(item_id: int, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Delete a wardrobe item by ID
    """
    item = _get_owned_item(db, user_id, item_id)

    # Delete from Cloudinary if it was uploaded there
    if item.cloudinary_id:
        delete_image_from_cloudinary(item.cloudinary_id)

    db.delete(item)
    db.commit()
    return Response(status_code=204)
