"""
Tests for image validation, clothing detection and profile photo analysis.
"""
import json

import pytest

from conftest import FakeGateway
from styleai.core.exceptions import InvalidInputError, UpstreamUnavailableError
from styleai.reco.detector import ClothingDetector, coerce_detection
from styleai.utils.image_analyzer import (
    ProfileImageAnalyzer,
    coerce_profile_analysis,
    estimate_decoded_size,
    validate_image_input,
)


class TestValidateImageInput:
    """Tests for validate_image_input()."""

    def test_accepts_data_url(self, image_data_url):
        assert validate_image_input(image_data_url) == image_data_url

    def test_accepts_https_url_when_remote_allowed(self):
        url = "https://cdn.example.com/look.jpg"
        assert validate_image_input(url, allow_remote=True) == url

    @pytest.mark.parametrize("url", ["https://x.example/a.png\n", "https://x.example/a.png\r\n", " https://x.example/a.png"])
    def test_rejects_url_with_surrounding_whitespace(self, url):
        with pytest.raises(InvalidInputError):
            validate_image_input(url, allow_remote=True)

    def test_rejects_https_url_when_remote_not_allowed(self):
        with pytest.raises(InvalidInputError):
            validate_image_input("https://cdn.example.com/look.jpg", allow_remote=False)

    @pytest.mark.parametrize("value", [
        None,
        "",
        123,
        "http://insecure.example.com/a.jpg",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png;base64,",
        "data:image/png;base64,not*base64!",
        "just some text",
    ])
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_image_input(value)
        assert exc_info.value.error_code == "invalid_input"
        assert exc_info.value.status_code == 400

    def test_rejects_oversized_payload(self, oversized_image_data_url):
        with pytest.raises(InvalidInputError, match="too large"):
            validate_image_input(oversized_image_data_url)

    def test_size_estimate_accounts_for_padding(self):
        assert estimate_decoded_size("aGVsbG8=") == 5
        assert estimate_decoded_size("aGVsbG8h") == 6


class TestClothingDetector:
    """Tests for ClothingDetector.detect()."""

    def test_invalid_image_never_reaches_upstream(self):
        gateway = FakeGateway()
        with pytest.raises(InvalidInputError):
            ClothingDetector(gateway).detect("not an image")
        assert gateway.calls == []

    def test_oversized_image_never_reaches_upstream(self, oversized_image_data_url):
        gateway = FakeGateway()
        with pytest.raises(InvalidInputError):
            ClothingDetector(gateway).detect(oversized_image_data_url)
        assert gateway.calls == []

    def test_detects_items(self, image_data_url):
        raw = [
            {"label": "Navy Blazer", "category": "Outerwear", "x": 50, "y": 30, "color": "navy", "style": "formal"},
            {"label": "White Sneakers", "category": "Shoes", "x": "48", "y": 90},
        ]
        gateway = FakeGateway(texts={"clothing_detection": "```json\n" + json.dumps(raw) + "\n```"})
        items = ClothingDetector(gateway).detect(image_data_url)
        assert [i.label for i in items] == ["Navy Blazer", "White Sneakers"]
        assert items[1].x == 48.0
        assert items[1].color is None
        assert gateway.calls[0]["image_url"] == image_data_url

    def test_unparseable_output_is_empty(self, image_data_url):
        gateway = FakeGateway(texts={"clothing_detection": "I see a person wearing clothes."})
        assert ClothingDetector(gateway).detect(image_data_url) == []

    def test_model_reports_nothing(self, image_data_url):
        gateway = FakeGateway(texts={"clothing_detection": "[]"})
        assert ClothingDetector(gateway).detect(image_data_url) == []

    def test_coordinates_are_clamped(self):
        item = coerce_detection({"label": "Hat", "x": -20, "y": 250})
        assert (item.x, item.y) == (0.0, 100.0)
        assert item.category == "Other"

    @pytest.mark.parametrize("value", [None, "left", float("nan"), [1]])
    def test_unreadable_coordinates_sit_at_center(self, value):
        assert coerce_detection({"label": "Hat", "x": value, "y": 10}).x == 50.0

    @pytest.mark.parametrize("entry", [{"category": "Tops"}, {"label": "   "}, "Hat", None])
    def test_entries_without_label_are_dropped(self, entry):
        assert coerce_detection(entry) is None


class TestProfileImageAnalyzer:
    """Tests for ProfileImageAnalyzer.analyze()."""

    def test_returns_analysis(self, image_data_url):
        text = json.dumps({
            "gender": "Female",
            "body_type": "athletic",
            "skin_tone": "medium",
            "hair_color": "brown",
            "hair_style": "long",
            "confidence": 87,
        })
        gateway = FakeGateway(texts={"profile_image_analysis": text})
        analysis = ProfileImageAnalyzer(gateway).analyze(image_data_url)
        assert analysis.gender == "female"
        assert analysis.body_type == "athletic"
        assert analysis.confidence == 87

    def test_rejects_remote_url(self):
        gateway = FakeGateway()
        with pytest.raises(InvalidInputError):
            ProfileImageAnalyzer(gateway).analyze("https://cdn.example.com/me.jpg")
        assert gateway.calls == []

    def test_unreadable_answer_is_upstream_unavailable(self, image_data_url):
        gateway = FakeGateway(texts={"profile_image_analysis": "A smiling person."})
        with pytest.raises(UpstreamUnavailableError):
            ProfileImageAnalyzer(gateway).analyze(image_data_url)

    def test_coercion_bounds_values(self):
        analysis = coerce_profile_analysis({"gender": "robot", "confidence": 400, "hair_color": "<red>"})
        assert analysis.gender == "unspecified"
        assert analysis.confidence == 100
        assert analysis.hair_color == "red"

    def test_coercion_handles_bad_confidence(self):
        assert coerce_profile_analysis({"confidence": "high"}).confidence == 0
        assert coerce_profile_analysis({"confidence": float("nan")}).confidence == 0
