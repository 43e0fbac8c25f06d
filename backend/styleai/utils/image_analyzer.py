"""
Image input validation and AI profile-photo analysis
"""
import base64
import binascii
import logging
import re
from typing import Any, Optional

from styleai.config import settings
from styleai.core.exceptions import InvalidInputError, UpstreamUnavailableError
from styleai.schemas.profile import ProfileAnalysis
from styleai.utils.ai_gateway import AIGatewayClient
from styleai.utils.json_extract import extract_json
from styleai.utils.sanitizer import sanitize

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:image/(jpeg|jpg|png|gif|webp);base64,", re.IGNORECASE)
HTTPS_URL_PATTERN = re.compile(r"https://\S+", re.IGNORECASE)


def extract_base64_from_data_url(data_url: str) -> Optional[str]:
    """Extract base64 data from data URL"""
    match = DATA_URL_PATTERN.match(data_url or "")
    if not match:
        return None
    return data_url[match.end():]


def estimate_decoded_size(payload: str) -> int:
    """Decoded byte count of a base64 payload, without decoding it"""
    length = len(payload)
    padding = len(payload) - len(payload.rstrip("="))
    return (length * 3) // 4 - padding


def validate_image_input(image: Any, allow_remote: bool = True, max_bytes: Optional[int] = None) -> str:
    """
    Check an image reference before it is sent anywhere.

    Accepts a base64 data URL (jpeg/png/gif/webp) and, when allow_remote is
    set, an HTTPS URL. Data URLs must be valid base64 and no larger than
    max_bytes once decoded.

    Raises:
        InvalidInputError: if the image is missing, malformed or too large
    """
    if not image or not isinstance(image, str):
        raise InvalidInputError("No image provided", field="image")

    max_bytes = settings.MAX_IMAGE_BYTES if max_bytes is None else max_bytes

    payload = extract_base64_from_data_url(image)
    if payload is None:
        if allow_remote and HTTPS_URL_PATTERN.fullmatch(image):
            return image
        raise InvalidInputError("Invalid image format. Please upload a valid image.", field="image")

    if not payload:
        raise InvalidInputError("Image is empty", field="image")

    # Size is checked on the encoded length; oversized uploads are never decoded
    if estimate_decoded_size(payload) > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise InvalidInputError(f"Image too large (max {limit_mb:.0f}MB)", field="image")

    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInputError("Invalid image format. Please upload a valid image.", field="image")

    return image


PROFILE_ANALYSIS_PROMPT = """You are an AI fashion stylist assistant that analyzes photos to determine physical attributes for fashion recommendations. Your primary task is to identify the person's gender presentation and other attributes to provide appropriate fashion recommendations.

You MUST respond with a valid JSON object with these exact fields:
{
  "gender": "male" | "female" | "unspecified",
  "body_type": "slim" | "athletic" | "average" | "curvy" | "plus",
  "skin_tone": "fair" | "light" | "medium" | "olive" | "tan" | "dark",
  "hair_color": "blonde" | "brown" | "black" | "red" | "gray" | "other",
  "hair_style": "short" | "medium" | "long" | "bald",
  "confidence": number between 0 and 100
}

Only use "unspecified" for gender if you truly cannot determine it. Be respectful and inclusive in your analysis.
Only return the JSON object, no other text."""

PROFILE_ANALYSIS_REQUEST = (
    "Analyze this photo and determine the person's gender, body type, skin tone, hair color, "
    "and hair style for personalized fashion recommendations."
)


def coerce_profile_analysis(raw: dict) -> ProfileAnalysis:
    """Fit a model-produced dict into ProfileAnalysis, dropping anything unusable"""
    gender = sanitize(raw.get("gender"), 20).lower()
    try:
        confidence = float(raw.get("confidence", 0))
    except (TypeError, ValueError):
        confidence = 0.0
    if confidence != confidence:  # NaN
        confidence = 0.0

    return ProfileAnalysis(
        gender=gender if gender in ("male", "female") else "unspecified",
        body_type=sanitize(raw.get("body_type"), 30) or None,
        skin_tone=sanitize(raw.get("skin_tone"), 30) or None,
        hair_color=sanitize(raw.get("hair_color"), 30) or None,
        hair_style=sanitize(raw.get("hair_style"), 30) or None,
        confidence=min(max(confidence, 0.0), 100.0),
    )


class ProfileImageAnalyzer:
    """Infers profile attributes (gender, body type, colouring) from a photo."""

    def __init__(self, gateway: AIGatewayClient):
        self.gateway = gateway

    def analyze(self, image_base64: Any) -> ProfileAnalysis:
        """
        Analyze a profile photo.

        Args:
            image_base64: Base64 data URL of the photo

        Returns:
            ProfileAnalysis

        Raises:
            InvalidInputError: before any upstream call, for a bad image
            UpstreamUnavailableError: if the model's answer cannot be read
        """
        image = validate_image_input(image_base64, allow_remote=False)

        logger.info("Analyzing profile image for physical attributes")
        text = self.gateway.complete_with_image(
            PROFILE_ANALYSIS_PROMPT,
            PROFILE_ANALYSIS_REQUEST,
            image,
            operation="profile_image_analysis",
        )

        raw = extract_json(text, expect=dict)
        if raw is None:
            logger.error(f"Invalid AI response format for profile analysis: {(text or '')[:200]}")
            raise UpstreamUnavailableError("Failed to analyze image. Please try again.")

        analysis = coerce_profile_analysis(raw)
        logger.info(f"Profile analysis complete, gender={analysis.gender}")
        return analysis
