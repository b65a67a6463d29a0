# gallery/services/ai.py
import logging
from typing import Any, List, Optional

from gallery.core.decorator import ValidationFailed
from gallery.schemas.ai import DescribeRequest
from gallery.utils.ai import ai_service

logger = logging.getLogger(__name__)

MAX_TITLES = 5
MAX_TITLE_LENGTH = 100
MAX_BLEND_MODE_LENGTH = 50


def sanitize_titles(titles: List[Any]) -> List[str]:
    """Keep non-blank string titles, at most MAX_TITLES, each truncated."""
    cleaned = []
    for title in titles:
        if isinstance(title, str) and title.strip():
            cleaned.append(title.strip()[:MAX_TITLE_LENGTH])
    return cleaned[:MAX_TITLES]


def validate_describe_request(request: DescribeRequest):
    """
    Check and sanitise an ai-describe body.

    Returns:
        (titles, blend_mode, intensity)

    Raises:
        ValidationFailed: on any missing or malformed field
    """
    titles = request.artwork_titles
    if not isinstance(titles, list) or not titles:
        raise ValidationFailed("artworkTitles is required and must be a non-empty array")

    blend_mode = request.blend_mode
    if not isinstance(blend_mode, str) or not blend_mode.strip():
        raise ValidationFailed("blendMode is required and must be a string")

    intensity = request.intensity
    if (
        isinstance(intensity, bool)
        or not isinstance(intensity, (int, float))
        or not 0 <= intensity <= 100
    ):
        raise ValidationFailed(
            "intensity is required and must be a number between 0 and 100"
        )

    sanitized = sanitize_titles(titles)
    if not sanitized:
        raise ValidationFailed("No valid artwork titles provided")

    return sanitized, blend_mode.strip()[:MAX_BLEND_MODE_LENGTH], float(intensity)


class OracleService:
    """Blend descriptions, provider status and free-form image synthesis."""

    async def describe(self, request: DescribeRequest) -> dict:
        titles, blend_mode, intensity = validate_describe_request(request)
        result = await ai_service.describe_blend(titles, blend_mode, intensity)
        logger.info(f"Described blend of {len(titles)} artworks ({blend_mode})")
        return result

    def status(self) -> dict:
        if ai_service.is_configured():
            return {
                "status": "OpenAI Connected",
                "message": "AI descriptions are generated by the provider",
            }
        return {
            "status": "Fallback Mode",
            "message": "Using local descriptions. Configure AI_API_KEY to enable the provider.",
        }

    async def synthesize(self, prompt: Optional[str]) -> dict:
        if not prompt or not prompt.strip():
            raise ValidationFailed("Prompt is required")

        result = await ai_service.generate_image(prompt.strip())
        return {"success": True, **result}


oracle_service = OracleService()
