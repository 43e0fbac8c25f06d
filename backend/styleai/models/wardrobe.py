"""
Wardrobe item model.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from .base import Base


class WardrobeItem(Base):
    """Wardrobe item model"""
    __tablename__ = "wardrobe_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(20), nullable=False, index=True)
    color = Column(String(50), nullable=False)
    brand = Column(String(100), nullable=True)
    size = Column(String(20), nullable=True)
    image_url = Column(Text, nullable=True)  # Cloudinary URL or caller-supplied URL
    cloudinary_id = Column(String(255), nullable=True)  # For deletion
    is_favorite = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "color": self.color,
            "brand": self.brand,
            "size": self.size,
            "image_url": self.image_url,
            "is_favorite": bool(self.is_favorite),
            "created_at": self.created_at,
        }
