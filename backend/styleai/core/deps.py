"""
Shared FastAPI dependencies.
"""
from typing import Optional

from fastapi import Header

from styleai.config import settings
from styleai.core.exceptions import AuthenticationError
from styleai.utils.ai_gateway import AIGatewayClient
from styleai.utils.sanitizer import sanitize

MAX_USER_ID_LENGTH = 128


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Resolve the opaque user identifier that scopes every stored record.

    Session management lives outside this service; callers forward the
    identity they already authenticated as the X-User-Id header.
    """
    user_id = sanitize(x_user_id, MAX_USER_ID_LENGTH)
    if not user_id:
        raise AuthenticationError("X-User-Id header is required")
    return user_id


def get_gateway() -> AIGatewayClient:
    """Build the upstream AI client from current settings.

    A missing credential is not checked here so that request validation
    still runs first; the client raises MisconfiguredError on first use.
    """
    return AIGatewayClient(
        api_key=settings.AI_GATEWAY_API_KEY,
        url=settings.AI_GATEWAY_URL,
        text_model=settings.AI_TEXT_MODEL,
        image_model=settings.AI_IMAGE_MODEL,
        timeout=settings.UPSTREAM_TIMEOUT,
    )
