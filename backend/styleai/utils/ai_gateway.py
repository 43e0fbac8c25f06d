"""
Client for the upstream multimodal AI gateway.

The gateway speaks the OpenAI-compatible chat completions protocol and is
treated as a black box offering two capabilities: text (optionally with an
image) in, text out; and text in, image out. Every call is a single
request with an explicit timeout. HTTP failures are mapped onto the
service's error taxonomy here so that no upstream text leaks to callers.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from styleai.core.exceptions import (
    MisconfiguredError,
    QuotaExhaustedError,
    RateLimitedError,
    UpstreamUnavailableError,
)
from styleai.utils.profiler import get_profiler

logger = logging.getLogger(__name__)


class AIGatewayClient:
    """Thin wrapper over the chat completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        url: str,
        text_model: str,
        image_model: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.url = url
        self.text_model = text_model
        self.image_model = image_model
        self.timeout = timeout
        self.session = session or requests

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _post(self, payload: Dict[str, Any], operation: str) -> Dict[str, Any]:
        if not self.configured:
            logger.error("AI_GATEWAY_API_KEY is not configured")
            raise MisconfiguredError()

        profiler = get_profiler()
        try:
            with profiler.measure(operation):
                response = self.session.post(
                    self.url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                    timeout=self.timeout,
                )
        except requests.Timeout:
            logger.error(f"AI gateway timed out after {self.timeout}s ({operation})")
            raise UpstreamUnavailableError("The AI service took too long to respond. Please try again.")
        except requests.RequestException as e:
            logger.error(f"AI gateway request failed ({operation}): {e}")
            raise UpstreamUnavailableError()

        if response.status_code == 429:
            logger.warning(f"AI gateway rate limited ({operation})")
            raise RateLimitedError()
        if response.status_code == 402:
            logger.error(f"AI gateway credits exhausted ({operation})")
            raise QuotaExhaustedError()
        if not 200 <= response.status_code < 300:
            logger.error(f"AI gateway error ({operation}): {response.status_code} {response.text[:500]}")
            raise UpstreamUnavailableError()

        try:
            return response.json()
        except ValueError:
            logger.error(f"AI gateway returned a non-JSON body ({operation})")
            raise UpstreamUnavailableError()

    @staticmethod
    def _first_message(data: Dict[str, Any]) -> Dict[str, Any]:
        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
            return {}
        message = choices[0].get("message")
        return message if isinstance(message, dict) else {}

    def chat(self, messages: List[Dict[str, Any]], operation: str = "ai_gateway_chat") -> str:
        """
        Run one chat completion with the text model.

        Returns:
            The assistant's text content, or "" when the response carried none
        """
        data = self._post({"model": self.text_model, "messages": messages}, operation)
        content = self._first_message(data).get("content")
        if not isinstance(content, str):
            logger.warning(f"No text content in AI gateway response ({operation})")
            return ""
        return content

    def complete(self, system: str, user: str, operation: str = "ai_gateway_text") -> str:
        """Text in, text out."""
        return self.chat(
            [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            operation=operation,
        )

    def complete_with_image(self, system: str, text: str, image_url: str, operation: str = "ai_gateway_vision") -> str:
        """Text plus one image (data URL or HTTPS URL) in, text out."""
        return self.chat(
            [
                {"role": "system", "content": system},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": text},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
            operation=operation,
        )

    def generate_image(self, prompt: str, operation: str = "ai_gateway_image") -> Optional[str]:
        """
        Text in, image out.

        Returns:
            The first returned image reference (remote URL or data URL), or None
        """
        data = self._post(
            {
                "model": self.image_model,
                "messages": [{"role": "user", "content": prompt}],
                "modalities": ["image", "text"],
            },
            operation,
        )
        images = self._first_message(data).get("images")
        if not images or not isinstance(images, list) or not isinstance(images[0], dict):
            return None
        image_url = images[0].get("image_url")
        if isinstance(image_url, dict):
            url = image_url.get("url")
            return url if isinstance(url, str) and url else None
        return None
