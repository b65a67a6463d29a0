"""Integration tests for /ai-describe and /synthesize."""

from fastapi import HTTPException

from gallery.utils.ai import ai_service

BLEND = {"artworkTitles": ["Aurora", "Void"], "blendMode": "quantum", "intensity": 40}


class TestDescribe:
    """Tests for the blend description endpoint."""

    def test_fallback_is_deterministic(self, client):
        first = client.post("/ai-describe", json=BLEND)
        second = client.post("/ai-describe", json=BLEND)

        assert first.status_code == 200
        assert first.json() == second.json()
        props = first.json()["mysticalProperties"]
        assert props["sacredGeometry"] == "Metatron's Cube"
        assert props["dimensionalDepth"] == "40% conscious awareness"
        assert set(props) == {"dimensionalDepth", "sacredGeometry", "vibrationalFreq"}
        assert props["vibrationalFreq"].endswith("Hz")

    def test_missing_titles(self, client):
        response = client.post("/ai-describe", json={**BLEND, "artworkTitles": []})

        assert response.status_code == 400
        assert response.json()["error"] == "artworkTitles is required and must be a non-empty array"

    def test_intensity_out_of_range(self, client):
        response = client.post("/ai-describe", json={**BLEND, "intensity": 140})

        assert response.status_code == 400

    def test_status(self, client):
        assert client.get("/ai-describe").json()["status"] == "Fallback Mode"


class TestSynthesize:
    """Tests for the free-form image endpoint."""

    def test_requires_prompt(self, client, auth_headers):
        response = client.post("/synthesize", json={"prompt": ""}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Prompt is required"

    def test_returns_image(self, client, auth_headers, monkeypatch):
        async def fake_generate_image(prompt):
            return {"image_url": "https://images.example/x.png", "revised_prompt": prompt}

        monkeypatch.setattr(ai_service, "generate_image", fake_generate_image)

        response = client.post("/synthesize", json={"prompt": "a nebula"}, headers=auth_headers)

        assert response.json() == {
            "success": True,
            "imageUrl": "https://images.example/x.png",
            "revisedPrompt": "a nebula",
        }

    def test_quota_error_is_passed_through(self, client, auth_headers, monkeypatch):
        async def exhausted(prompt):
            raise HTTPException(status_code=429, detail="API quota exceeded.")

        monkeypatch.setattr(ai_service, "generate_image", exhausted)

        response = client.post("/synthesize", json={"prompt": "a nebula"}, headers=auth_headers)

        assert response.status_code == 429

    def test_unconfigured_provider(self, client, auth_headers):
        response = client.post("/synthesize", json={"prompt": "a nebula"}, headers=auth_headers)

        assert response.status_code == 500
