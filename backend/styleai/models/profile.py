"""
Style profile model.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, JSON, String

from .base import Base


class Profile(Base):
    """One style profile per user"""
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), nullable=False, unique=True, index=True)
    full_name = Column(String(100), nullable=True)
    gender = Column(String(20), nullable=False, default="unspecified")
    body_type = Column(String(30), nullable=True)
    skin_tone = Column(String(30), nullable=True)
    hair_color = Column(String(30), nullable=True)
    hair_style = Column(String(30), nullable=True)
    style_preference = Column(String(50), nullable=True)
    preferred_colors = Column(JSON, nullable=True)  # list of color names, at most 10
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pipeline_dict(self) -> dict:
        """Shape expected by the recommendation pipeline"""
        return {
            "gender": self.gender,
            "body_type": self.body_type,
            "skin_tone": self.skin_tone,
            "hair_color": self.hair_color,
            "hair_style": self.hair_style,
            "style_preference": self.style_preference,
            "preferred_colors": self.preferred_colors or [],
        }
