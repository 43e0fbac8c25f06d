"""
Database models for StyleAI.

Import all models here for easy access and to ensure they are registered with SQLAlchemy.
"""
from .base import Base
from .profile import Profile
from .wardrobe import WardrobeItem
from .outfit import SavedOutfit

__all__ = ["Base", "Profile", "WardrobeItem", "SavedOutfit"]
