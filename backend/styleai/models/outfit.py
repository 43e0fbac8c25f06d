"""
Saved outfit model.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String

from .base import Base


class SavedOutfit(Base):
    """A generated suggestion the user chose to keep"""
    __tablename__ = "outfit_suggestions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    occasion = Column(String(200), nullable=False)
    suggestion_data = Column(JSON, nullable=False)  # OutfitSuggestion stored verbatim
    is_saved = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
