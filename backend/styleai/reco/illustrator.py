from __future__ import annotations

import logging
from typing import Optional

from ..schemas.outfit import OutfitSuggestion
from ..utils.ai_gateway import AIGatewayClient

logger = logging.getLogger(__name__)

STYLE_SUFFIX = "professional fashion editorial, flat-lay, styled on a clean neutral background"
GENDER_CLOTHING = {"male": "men's", "female": "women's", "unspecified": "gender-neutral"}


def build_image_prompt(suggestion: OutfitSuggestion, occasion: str, gender: str) -> str:
    """Assemble an illustration prompt from the outfit parts."""
    clothing = GENDER_CLOTHING.get(gender, GENDER_CLOTHING["unspecified"])
    outfit = suggestion.outfit
    parts = [outfit.top, outfit.bottom, outfit.shoes]
    if outfit.outerwear:
        parts.append(outfit.outerwear)
    if outfit.accessories:
        parts.append(outfit.accessories)
    return f"Fashion photography of a complete {clothing} {occasion} outfit: {', '.join(parts)}, {STYLE_SUFFIX}"


class OutfitIllustrator:
    """Best-effort image generation for a finished suggestion."""

    def __init__(self, gateway: AIGatewayClient):
        self.gateway = gateway

    def illustrate(self, suggestion: OutfitSuggestion, occasion: str, gender: str) -> Optional[str]:
        """
        Generate an outfit image.

        Returns:
            Image URL or data URL, or None on any failure
        """
        clothing = GENDER_CLOTHING.get(gender, GENDER_CLOTHING["unspecified"])
        base_prompt = suggestion.image_prompt or build_image_prompt(suggestion, occasion, gender)
        prompt = (
            f"Generate a high-quality fashion flat lay image: {base_prompt}. "
            f"Make it look like a professional fashion magazine photoshoot with clean styling. "
            f"This is {clothing} clothing."
        )
        try:
            image = self.gateway.generate_image(prompt, operation="outfit_illustration")
        except Exception as e:
            logger.warning(f"Outfit illustration failed, continuing without image: {e}")
            return None

        if not image:
            logger.info("Image generation returned no image")
        return image
