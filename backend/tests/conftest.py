"""
Shared fixtures for the StyleAI test-suite.

Settings are read at import time, so the environment is pinned here before
anything from styleai is imported.
"""
import base64
import json
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AI_GATEWAY_API_KEY"] = "test-key"
os.environ["USE_CLOUDINARY"] = "false"
os.environ["ILLUSTRATE_OUTFITS"] = "true"
os.environ["PRODUCT_SEARCH_STRATEGY"] = "deterministic"

import pytest
from fastapi.testclient import TestClient


class FakeGateway:
    """Stands in for AIGatewayClient and records every call.

    texts maps an operation name to the text the model "returns"; error, when
    set, is raised by every call.
    """

    def __init__(self, texts=None, image=None, error=None):
        self.texts = dict(texts or {})
        self.image = image
        self.error = error
        self.calls = []

    def _answer(self, method, operation, **kwargs):
        self.calls.append({"method": method, "operation": operation, **kwargs})
        if self.error is not None:
            raise self.error
        return self.texts.get(operation, "")

    def complete(self, system, user, operation="ai_gateway_text"):
        return self._answer("complete", operation, system=system, user=user)

    def complete_with_image(self, system, text, image_url, operation="ai_gateway_vision"):
        return self._answer("complete_with_image", operation, system=system, text=text, image_url=image_url)

    def generate_image(self, prompt, operation="ai_gateway_image"):
        self.calls.append({"method": "generate_image", "operation": operation, "prompt": prompt})
        if self.error is not None:
            raise self.error
        return self.image

    def operations(self):
        return [c["operation"] for c in self.calls]


VALID_SUGGESTION = {
    "outfit": {
        "top": "White silk blouse",
        "bottom": "Black tailored trousers",
        "outerwear": "Camel wool coat",
        "shoes": "Black leather loafers",
        "accessories": None,
    },
    "explanation": "Clean lines and a neutral palette read polished for the office.",
    "styling_tips": ["Tuck the blouse in", "Keep jewelry minimal"],
    "color_harmony": "Black and white anchored by a warm camel.",
    "alternatives": {"top": "Grey fine-knit sweater", "bottom": "Charcoal pencil skirt"},
    "image_prompt": "Minimalist workwear flat lay for a woman",
}


@pytest.fixture
def suggestion_text():
    return "Here is your look:\n```json\n" + json.dumps(VALID_SUGGESTION) + "\n```"


@pytest.fixture
def image_data_url():
    """A small, well-formed base64 data URL"""
    payload = base64.b64encode(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64).decode("ascii")
    return f"data:image/png;base64,{payload}"


@pytest.fixture
def oversized_image_data_url():
    """About 6MB once decoded"""
    return "data:image/jpeg;base64," + "A" * (8 * 1024 * 1024)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app():
    from styleai.main import app
    return app


@pytest.fixture(scope="session", autouse=True)
def database():
    """Tables exist for every test module, whether or not it imports the app"""
    from styleai.database import init_db

    init_db()


@pytest.fixture(autouse=True)
def clean_database(database):
    """Every test starts with empty tables"""
    yield
    from styleai.database import engine
    from styleai.models import Base

    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client(app, gateway):
    """Test client whose AI gateway is the recording fake"""
    from styleai.core.deps import get_gateway

    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    return {"X-User-Id": "user-123"}
