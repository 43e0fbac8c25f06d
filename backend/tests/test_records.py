"""
HTTP tests for the per-user record store: profile, wardrobe and saved outfits.
"""
import json

import pytest

from conftest import VALID_SUGGESTION


OTHER_USER = {"X-User-Id": "someone-else"}


def _add_item(client, headers, **overrides):
    body = {"name": "Oxford shirt", "category": "shirt", "color": "white"}
    body.update(overrides)
    response = client.post("/wardrobe", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestIdentity:
    """Every record endpoint needs the X-User-Id header."""

    @pytest.mark.parametrize("method,path", [
        ("get", "/profile"),
        ("get", "/wardrobe"),
        ("get", "/wardrobe/stats"),
        ("get", "/saved-outfits"),
    ])
    def test_missing_user_is_401(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.json()["error_code"] == "authentication_error"

    def test_blank_user_is_401(self, client):
        assert client.get("/profile", headers={"X-User-Id": "   "}).status_code == 401


class TestProfile:
    """Tests for /profile."""

    def test_profile_created_on_first_read(self, client, user_headers):
        response = client.get("/profile", headers=user_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "user-123"
        assert data["gender"] == "unspecified"
        assert data["preferred_colors"] == []

    def test_update_profile(self, client, user_headers):
        response = client.put(
            "/profile",
            json={"full_name": "Sam", "gender": "male", "style_preference": "smart casual",
                  "preferred_colors": ["navy", " ", "olive"]},
            headers=user_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["gender"] == "male"
        assert data["preferred_colors"] == ["navy", "olive"]

        # Omitted fields are untouched
        response = client.put("/profile", json={"body_type": "athletic"}, headers=user_headers)
        assert response.json()["full_name"] == "Sam"
        assert response.json()["body_type"] == "athletic"

    def test_too_many_colors(self, client, user_headers):
        response = client.put("/profile", json={"preferred_colors": [f"c{i}" for i in range(11)]}, headers=user_headers)
        assert response.status_code == 400

    def test_invalid_gender(self, client, user_headers):
        response = client.put("/profile", json={"gender": "robot"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["error_code"] == "invalid_input"

    def test_analyze_merges_into_profile(self, client, gateway, user_headers, image_data_url):
        client.put("/profile", json={"hair_color": "black", "gender": "female"}, headers=user_headers)
        gateway.texts["profile_image_analysis"] = json.dumps(
            {"gender": "unspecified", "body_type": "curvy", "skin_tone": "olive", "confidence": 55}
        )
        response = client.post("/profile/analyze", json={"imageBase64": image_data_url}, headers=user_headers)
        assert response.status_code == 200
        profile = response.json()["profile"]
        assert profile["body_type"] == "curvy"
        assert profile["skin_tone"] == "olive"
        # Undetermined attributes keep their stored values
        assert profile["gender"] == "female"
        assert profile["hair_color"] == "black"


class TestWardrobe:
    """Tests for /wardrobe."""

    def test_create_and_list(self, client, user_headers):
        created = _add_item(client, user_headers, brand="Uniqlo", image_url="https://img.test/shirt.jpg")
        assert created["id"] > 0
        assert created["image_url"] == "https://img.test/shirt.jpg"

        response = client.get("/wardrobe", headers=user_headers)
        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "1"
        assert [i["name"] for i in response.json()] == ["Oxford shirt"]

    def test_wardrobes_are_isolated(self, client, user_headers):
        item = _add_item(client, user_headers)
        assert client.get("/wardrobe", headers=OTHER_USER).json() == []
        assert client.delete(f"/wardrobe/{item['id']}", headers=OTHER_USER).status_code == 404

    def test_filter_by_category(self, client, user_headers):
        _add_item(client, user_headers)
        _add_item(client, user_headers, name="Chinos", category="pants", color="khaki")
        response = client.get("/wardrobe", params={"category": "pants"}, headers=user_headers)
        assert [i["name"] for i in response.json()] == ["Chinos"]

    def test_unknown_category_rejected(self, client, user_headers):
        response = client.post("/wardrobe", json={"name": "Cape", "category": "cape", "color": "red"}, headers=user_headers)
        assert response.status_code == 400

    def test_update_and_favorite(self, client, user_headers):
        item = _add_item(client, user_headers)
        response = client.patch(f"/wardrobe/{item['id']}", json={"color": "light blue"}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["color"] == "light blue"
        assert response.json()["name"] == "Oxford shirt"

        response = client.post(f"/wardrobe/{item['id']}/favorite", headers=user_headers)
        assert response.json()["is_favorite"] is True
        response = client.post(f"/wardrobe/{item['id']}/favorite", headers=user_headers)
        assert response.json()["is_favorite"] is False

    def test_delete(self, client, user_headers):
        item = _add_item(client, user_headers)
        assert client.delete(f"/wardrobe/{item['id']}", headers=user_headers).status_code == 204
        assert client.get("/wardrobe", headers=user_headers).json() == []
        assert client.delete(f"/wardrobe/{item['id']}", headers=user_headers).status_code == 404

    def test_stats(self, client, user_headers):
        _add_item(client, user_headers)
        _add_item(client, user_headers, name="Tee", color="black")
        _add_item(client, user_headers, name="Jeans", category="pants", color="indigo")
        _add_item(client, user_headers, name="Boots", category="shoes", color="brown")
        response = client.get("/wardrobe/stats", headers=user_headers)
        assert response.json() == {"total": 4, "shirts": 2, "pants": 1, "other": 1}


class TestSavedOutfits:
    """Tests for /saved-outfits."""

    def test_save_list_delete(self, client, user_headers):
        suggestion = {k: v for k, v in VALID_SUGGESTION.items() if k != "image_prompt"}
        response = client.post("/saved-outfits", json={"occasion": "work", "suggestion": suggestion}, headers=user_headers)
        assert response.status_code == 201
        saved = response.json()
        assert saved["suggestion_data"]["outfit"]["top"] == "White silk blouse"

        listed = client.get("/saved-outfits", headers=user_headers).json()
        assert [o["id"] for o in listed] == [saved["id"]]
        assert client.get("/saved-outfits", headers=OTHER_USER).json() == []

        assert client.delete(f"/saved-outfits/{saved['id']}", headers=user_headers).status_code == 204
        assert client.get("/saved-outfits", headers=user_headers).json() == []

    def test_invalid_suggestion_rejected(self, client, user_headers):
        response = client.post(
            "/saved-outfits", json={"occasion": "work", "suggestion": {"outfit": {}}}, headers=user_headers
        )
        assert response.status_code == 400


class TestMySuggestion:
    """Tests for POST /me/suggest-outfit."""

    def test_uses_stored_profile_and_wardrobe(self, client, gateway, user_headers, suggestion_text):
        client.put("/profile", json={"gender": "male", "style_preference": "classic"}, headers=user_headers)
        _add_item(client, user_headers, name="Oxford", color="white")
        gateway.texts["outfit_suggestion"] = suggestion_text

        response = client.post("/me/suggest-outfit", json={"occasion": "interview"}, headers=user_headers)
        assert response.status_code == 200
        call = gateway.calls[0]
        assert "The user is MALE" in call["system"]
        assert "white shirt (Oxford)" in call["user"]
        assert "interview" in call["user"]

    def test_without_stored_data(self, client, gateway, user_headers):
        response = client.post("/me/suggest-outfit", json={}, headers=user_headers)
        assert response.status_code == 200
        assert "No profile information available" in gateway.calls[0]["user"]


def test_tables_exist_without_the_app():
    from sqlalchemy import inspect

    from styleai.database import engine

    tables = set(inspect(engine).get_table_names())
    assert {"profiles", "wardrobe_items", "outfit_suggestions"} <= tables
