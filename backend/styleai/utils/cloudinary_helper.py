"""
Cloudinary image upload helper functions
"""
import logging
from typing import Any, Dict, List, Optional

import cloudinary
import cloudinary.uploader

from styleai.config import settings
from styleai.core.exceptions import UpstreamUnavailableError
from styleai.utils.image_analyzer import extract_base64_from_data_url

logger = logging.getLogger(__name__)


def initialize_cloudinary() -> bool:
    """Initialize Cloudinary with configuration from settings"""
    if settings.cloudinary_configured:
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True
        )
        return True
    return False


def cloudinary_enabled() -> bool:
    return settings.USE_CLOUDINARY and settings.cloudinary_configured


def upload_image_to_cloudinary(
    image_data: str,
    folder: Optional[str] = None,
    tags: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Upload a wardrobe image to Cloudinary.

    Args:
        image_data: Base64 data URL or regular URL
        folder: Cloudinary folder name (default: from settings)
        tags: List of tags to add to the image

    Returns:
        Dict with 'url', 'public_id' and 'uploaded'. Regular URLs are
        returned as-is with uploaded=False.

    Raises:
        UpstreamUnavailableError: If the upload fails
    """
    if extract_base64_from_data_url(image_data) is None:
        return {"url": image_data, "public_id": None, "uploaded": False}

    initialize_cloudinary()
    upload_options: Dict[str, Any] = {
        "folder": folder or settings.CLOUDINARY_FOLDER,
        "resource_type": "image",
        "transformation": [
            {"quality": "auto:good"},
            {"fetch_format": "auto"}
        ]
    }
    if tags:
        upload_options["tags"] = tags

    try:
        result = cloudinary.uploader.upload(image_data, **upload_options)
    except Exception as e:
        logger.error(f"Cloudinary upload failed: {e}")
        raise UpstreamUnavailableError("Image upload failed")

    return {
        "url": result.get("secure_url"),
        "public_id": result.get("public_id"),
        "uploaded": True,
    }


def store_wardrobe_image(image_data: Optional[str], tags: List[str]) -> Dict[str, Any]:
    """Upload when object storage is enabled; fall back to the original URL on any failure"""
    stored = {"url": image_data, "public_id": None}
    if not image_data or not cloudinary_enabled():
        return stored
    try:
        result = upload_image_to_cloudinary(image_data, tags=tags)
    except UpstreamUnavailableError:
        return stored
    if result.get("uploaded"):
        stored = {"url": result["url"], "public_id": result.get("public_id")}
    return stored


def delete_image_from_cloudinary(public_id: str) -> bool:
    """
    Delete an image from Cloudinary.

    Returns:
        bool: True if deletion was successful
    """
    if not settings.cloudinary_configured:
        return False

    try:
        initialize_cloudinary()
        result = cloudinary.uploader.destroy(public_id)
        return result.get("result") == "ok"
    except Exception as e:
        logger.warning(f"Failed to delete image from Cloudinary: {e}")
        return False
