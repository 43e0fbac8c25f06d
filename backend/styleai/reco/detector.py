from __future__ import annotations

import logging
import math
from typing import Any, List, Optional

from ..schemas.vision import DetectedItem
from ..utils.ai_gateway import AIGatewayClient
from ..utils.image_analyzer import validate_image_input
from ..utils.json_extract import extract_json

logger = logging.getLogger(__name__)

DETECTION_PROMPT = """You are a fashion AI that detects clothing items in images. Analyze the image and identify all visible clothing items and accessories.

For each item, provide:
- label: The specific name of the item (e.g., "Navy Blue Blazer", "White Sneakers")
- category: The category (Tops, Bottoms, Outerwear, Shoes, Accessories, Bags, Jewelry)
- x: Horizontal position as percentage (0-100) where the item is centered
- y: Vertical position as percentage (0-100) where the item is centered
- color: Primary color of the item
- style: Style description (casual, formal, sporty, etc.)

Return ONLY a valid JSON array of items. Example:
[
  {"label": "Navy Blue Blazer", "category": "Outerwear", "x": 50, "y": 30, "color": "navy", "style": "formal"},
  {"label": "White T-Shirt", "category": "Tops", "x": 50, "y": 45, "color": "white", "style": "casual"}
]

Be precise with positions - consider where items are actually located in the image."""

DETECTION_REQUEST = "Detect all clothing items and accessories in this image. Return only the JSON array."

DEFAULT_CATEGORY = "Other"
CENTER = 50.0


def _coordinate(value: Any) -> float:
    """Percentage coordinate clamped to [0, 100]; unreadable values sit at the center"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return CENTER
    if math.isnan(number):
        return CENTER
    return min(max(number, 0.0), 100.0)


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def coerce_detection(entry: Any) -> Optional[DetectedItem]:
    """Fit one model-returned entry into a DetectedItem; None if it has no label"""
    if not isinstance(entry, dict):
        return None
    label = _text(entry.get("label"))
    if label is None:
        return None
    return DetectedItem(
        label=label,
        category=_text(entry.get("category")) or DEFAULT_CATEGORY,
        x=_coordinate(entry.get("x")),
        y=_coordinate(entry.get("y")),
        color=_text(entry.get("color")),
        style=_text(entry.get("style")),
    )


class ClothingDetector:
    """Finds clothing items and their hotspot positions in a photo."""

    def __init__(self, gateway: AIGatewayClient):
        self.gateway = gateway

    def detect(self, image: Any) -> List[DetectedItem]:
        """
        Detect clothing items in an image.

        Args:
            image: Base64 data URL or HTTPS URL

        Returns:
            Zero or more detected items; unreadable model output counts as zero

        Raises:
            InvalidInputError: before any upstream call, for a bad image
        """
        image = validate_image_input(image, allow_remote=True)

        logger.info("Detecting clothing items in image")
        text = self.gateway.complete_with_image(
            DETECTION_PROMPT,
            DETECTION_REQUEST,
            image,
            operation="clothing_detection",
        )

        raw_items = extract_json(text, expect=list)
        if raw_items is None:
            # Indistinguishable from "nothing found" for the caller; only the log differs
            logger.warning(f"Could not parse clothing detection output: {(text or '')[:200]}")
            return []

        items = [item for item in (coerce_detection(entry) for entry in raw_items) if item is not None]
        if not raw_items:
            logger.info("Model reported no clothing items")
        elif len(items) < len(raw_items):
            logger.info(f"Dropped {len(raw_items) - len(items)} unlabeled detection(s)")
        logger.info(f"Detected {len(items)} clothing item(s)")
        return items
