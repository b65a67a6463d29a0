"""Unit tests for AI pricing, confidence and local fallbacks."""

import asyncio

import pytest
from fastapi import HTTPException

from gallery.core.decorator import ValidationFailed
from gallery.schemas.ai import DescribeRequest
from gallery.services.ai import OracleService, sanitize_titles, validate_describe_request
from gallery.utils.ai import (
    AIService,
    calculate_confidence,
    calculate_price_recommendation,
    fallback_analysis,
    local_blend_description,
)


class TestPriceRecommendation:
    """Tests for calculate_price_recommendation."""

    def test_base_price_without_inputs(self):
        result = calculate_price_recommendation()

        assert result["suggested"] == 137
        assert result["min"] == 96
        assert result["max"] == 178

    def test_multipliers_compound(self):
        # 2MP -> x1.2, 2MB -> x1.1, 4 colours -> x1.2, oil -> x1.5
        result = calculate_price_recommendation(
            2000, 1000, 2 * 1024 * 1024, "Oil Painting", 4
        )

        assert result["suggested"] == round(137 * 1.2 * 1.1 * 1.2 * 1.5)
        assert result["factors"]["styleMultiplier"] == 1.5
        assert result["min"] < result["suggested"] < result["max"]

    def test_unknown_style_is_neutral(self):
        assert calculate_price_recommendation(style="Sand Mandala")["suggested"] == 137


class TestConfidence:
    """Tests for calculate_confidence."""

    def test_complete_analysis_scores_one(self):
        data = {
            "title": "Stellar Bloom",
            "description": "x" * 60,
            "suggestedTags": ["a", "b", "c"],
            "detectedStyle": "Abstract",
            "mood": "Serene",
            "colorPalette": ["#112233", "#aabbcc"],
        }

        assert calculate_confidence(data) == 1.0

    def test_empty_analysis_scores_zero(self):
        assert calculate_confidence({"colorPalette": ["not-a-colour"]}) == 0.0

    def test_partial_analysis(self):
        assert calculate_confidence({"title": "Nova", "mood": "Calm"}) == 0.3


class TestLocalBlendDescription:
    """Tests for the deterministic fallback description."""

    def test_same_inputs_same_output(self):
        first = local_blend_description(["Aurora", "Void"], "quantum", 40.0)
        second = local_blend_description(["Aurora", "Void"], "quantum", 40.0)

        assert first == second

    def test_shape(self):
        result = local_blend_description(["Aurora"], "quantum", 40.0)

        assert result["price"].startswith("$")
        assert 137 <= int(result["price"][1:]) < 637
        props = result["mystical_properties"]
        assert props["dimensional_depth"] == "40% conscious awareness"
        assert props["sacred_geometry"] == "Metatron's Cube"
        assert props["vibrational_freq"].endswith("Hz")

    def test_non_quantum_geometry(self):
        result = local_blend_description(["Aurora"], "harmonic", 12.5)

        assert result["mystical_properties"]["sacred_geometry"] == "Flower of Life"
        assert result["mystical_properties"]["dimensional_depth"].startswith("12.5%")


class TestFallbackAnalysis:
    def test_uses_hash_and_palette(self):
        result = fallback_analysis(800, 600, 1024, "deadbeefcafe", ["#010203"])

        assert result["title"] == "Untitled Artwork deadbeef"
        assert result["dominant_color"] == "#010203"
        assert result["confidence"] == 0.3


class TestDescribeValidation:
    """Tests for validate_describe_request and sanitize_titles."""

    def test_valid_request_is_sanitised(self):
        request = DescribeRequest(
            artwork_titles=["  Aurora ", "", 5, "x" * 150, "B", "C", "D", "E"],
            blend_mode=" quantum ",
            intensity=50,
        )

        titles, blend_mode, intensity = validate_describe_request(request)

        assert titles == ["Aurora", "x" * 100, "B", "C", "D"]
        assert blend_mode == "quantum"
        assert intensity == 50.0

    @pytest.mark.parametrize(
        "fields, message",
        [
            ({"blend_mode": "q", "intensity": 5}, "artworkTitles is required"),
            ({"artwork_titles": [], "blend_mode": "q", "intensity": 5}, "artworkTitles is required"),
            ({"artwork_titles": ["A"], "intensity": 5}, "blendMode is required"),
            ({"artwork_titles": ["A"], "blend_mode": 7, "intensity": 5}, "blendMode is required"),
            ({"artwork_titles": ["A"], "blend_mode": "q"}, "intensity is required"),
            ({"artwork_titles": ["A"], "blend_mode": "q", "intensity": 101}, "intensity is required"),
            ({"artwork_titles": ["A"], "blend_mode": "q", "intensity": True}, "intensity is required"),
            ({"artwork_titles": ["A"], "blend_mode": "q", "intensity": "50"}, "intensity is required"),
            ({"artwork_titles": ["", 3], "blend_mode": "q", "intensity": 5}, "No valid artwork titles"),
        ],
    )
    def test_invalid_requests(self, fields, message):
        with pytest.raises(ValidationFailed, match=message):
            validate_describe_request(DescribeRequest(**fields))

    def test_sanitize_titles_caps_count(self):
        assert len(sanitize_titles([f"T{i}" for i in range(9)])) == 5


class TestOracleService:
    """Tests for OracleService without a configured provider."""

    def test_describe_falls_back_locally(self):
        request = DescribeRequest(
            artwork_titles=["Aurora", "Void"], blend_mode="quantum", intensity=40
        )

        result = asyncio.run(OracleService().describe(request))

        assert result == local_blend_description(["Aurora", "Void"], "quantum", 40.0)

    def test_status_reports_fallback(self):
        assert OracleService().status()["status"] == "Fallback Mode"

    def test_synthesize_requires_prompt(self):
        with pytest.raises(ValidationFailed, match="Prompt is required"):
            asyncio.run(OracleService().synthesize("   "))

    def test_generate_image_unconfigured(self):
        service = AIService()
        service.api_key = ""

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(service.generate_image("a nebula"))

        assert exc_info.value.status_code == 500

    def test_close_releases_client(self):
        closed = []

        class FakeClient:
            async def close(self):
                closed.append(True)

        service = AIService()
        service._client = FakeClient()

        asyncio.run(service.close())
        asyncio.run(service.close())

        assert closed == [True]
        assert service._client is None
