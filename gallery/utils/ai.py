# gallery/utils/ai.py
"""
AI utility for the gallery: blend descriptions, artwork vision analysis and
image synthesis through an OpenAI-compatible API.

Every text/vision feature degrades to a deterministic local result when the
provider is not configured or fails; image synthesis has no local fallback.
"""

import base64
import hashlib
import json
import logging
import math
import re
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from openai import (
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)

from gallery.core.config import settings
from gallery.utils.prompts import (
    ORACLE_SYSTEM_MESSAGE,
    VISION_SYSTEM_MESSAGE,
    VISION_USER_PROMPT,
    format_intensity,
    get_blend_description_prompt,
    get_local_blend_descriptions,
)

logger = logging.getLogger(__name__)

BASE_PRICE = 137
EMPTY_RESPONSE_DESCRIPTION = "A cosmic fusion beyond words..."

STYLE_MULTIPLIERS = {
    "Oil Painting": 1.5,
    "Abstract": 1.3,
    "Impressionist": 1.4,
    "Mixed Media": 1.3,
    "Digital Art": 1.0,
    "Photography": 0.8,
    "Watercolor": 1.2,
    "Acrylic": 1.3,
}

FALLBACK_PALETTE = ["#9333ea", "#6b46c1", "#c084fc"]
FALLBACK_TAGS = ["digital", "abstract", "consciousness", "cosmic"]
HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_price_recommendation(
    width: Optional[int] = None,
    height: Optional[int] = None,
    file_size: Optional[int] = None,
    style: Optional[str] = None,
    color_count: int = 0,
) -> Dict[str, Any]:
    """
    Market-value price suggestion starting from the 137 base price.

    Size adds 10% per megapixel, file size 5% per MB (detail proxy), each
    palette colour 5%, and the detected style applies a demand multiplier.
    The accepted range is +/-30% around the suggestion.
    """
    size_multiplier = 1.0
    if width and height:
        size_multiplier = 1 + (width * height / 1_000_000) / 10

    complexity_multiplier = 1.0
    if file_size:
        complexity_multiplier = 1 + (file_size / (1024 * 1024)) / 20

    color_multiplier = 1 + color_count / 20 if color_count else 1.0
    style_multiplier = STYLE_MULTIPLIERS.get(style or "", 1.0)

    suggested = _round_half_up(
        BASE_PRICE
        * size_multiplier
        * complexity_multiplier
        * color_multiplier
        * style_multiplier
    )

    return {
        "suggested": suggested,
        "min": _round_half_up(suggested * 0.7),
        "max": _round_half_up(suggested * 1.3),
        "factors": {
            "sizeMultiplier": size_multiplier,
            "complexityMultiplier": complexity_multiplier,
            "colorRichnessMultiplier": color_multiplier,
            "styleMultiplier": style_multiplier,
        },
    }


def calculate_confidence(data: Dict[str, Any]) -> float:
    """Score 0..1 by how complete the provider's analysis is."""
    score = 0.0
    if isinstance(data.get("title"), str) and len(data["title"]) > 3:
        score += 0.2
    if isinstance(data.get("description"), str) and len(data["description"]) > 50:
        score += 0.25
    tags = data.get("suggestedTags")
    if isinstance(tags, list) and len(tags) >= 3:
        score += 0.2
    if data.get("detectedStyle"):
        score += 0.15
    if data.get("mood"):
        score += 0.1
    palette = data.get("colorPalette")
    if isinstance(palette, list) and all(
        isinstance(c, str) and HEX_COLOR.match(c) for c in palette
    ):
        score += 0.1
    return round(min(1.0, score), 2)


def _input_seed(*parts: Any) -> int:
    digest = hashlib.sha256("|".join(str(p) for p in parts).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def mystical_properties(
    titles: List[str], blend_mode: str, intensity: float
) -> Dict[str, str]:
    seed = _input_seed(*titles, blend_mode, intensity)
    return {
        "vibrational_freq": f"{432 + (seed >> 16) % 200}Hz",
        "dimensional_depth": f"{format_intensity(intensity)}% conscious awareness",
        "sacred_geometry": (
            "Metatron's Cube" if blend_mode == "quantum" else "Flower of Life"
        ),
    }


def local_blend_description(
    titles: List[str], blend_mode: str, intensity: float
) -> Dict[str, Any]:
    """Deterministic description: the same inputs always give the same result."""
    seed = _input_seed(*titles, blend_mode, intensity)
    options = get_local_blend_descriptions(titles, blend_mode, intensity)
    return {
        "description": options[seed % len(options)],
        "price": f"${BASE_PRICE + (seed >> 8) % 500}",
        "mystical_properties": mystical_properties(titles, blend_mode, intensity),
    }


def fallback_analysis(
    width: Optional[int] = None,
    height: Optional[int] = None,
    file_size: Optional[int] = None,
    file_hash: Optional[str] = None,
    color_palette: Optional[List[str]] = None,
) -> Dict[str, Any]:
    palette = (color_palette or FALLBACK_PALETTE)[:5]
    return {
        "title": f"Untitled Artwork {file_hash[:8]}" if file_hash else "Untitled Artwork",
        "description": (
            "A captivating piece from the cosmic consciousness realm. "
            "Awaiting deeper analysis and description."
        ),
        "suggested_tags": list(FALLBACK_TAGS),
        "detected_style": "Digital Art",
        "mood": "Contemplative",
        "color_palette": palette,
        "dominant_color": palette[0],
        "price_recommendation": calculate_price_recommendation(
            width, height, file_size, "Digital Art", 3
        ),
        "confidence": 0.3,
    }


class AIService:
    """Service to interact with an OpenAI-compatible API"""

    def __init__(self):
        self.api_key = settings.ai_api_key
        self.api_endpoint = settings.ai_api_endpoint
        self.model = settings.ai_model
        self.vision_model = settings.ai_vision_model
        self.image_model = settings.ai_image_model
        self._client: Optional[AsyncOpenAI] = None

        if not self.api_key:
            logger.warning("AI_API_KEY not configured. AI features run in fallback mode.")

    @property
    def client(self) -> AsyncOpenAI:
        # The SDK refuses to build a client without a key, so create it lazily
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.api_endpoint or None,
                timeout=settings.ai_timeout,
                max_retries=2,
            )
        return self._client

    async def close(self):
        """Close the OpenAI client and release resources"""
        if self._client is not None:
            await self._client.close()
            self._client = None

    def is_configured(self) -> bool:
        """Check if AI service is properly configured"""
        return bool(self.api_key)

    def _extract_json_from_response(self, text: str) -> Any:
        """
        Parse JSON from a response that may be wrapped in ```json fences.

        Raises:
            ValueError: If no JSON can be parsed
        """
        match = re.search(r"```(?:json)?\s*\n?([\s\S]*?)\n?```", text)
        json_text = match.group(1).strip() if match else text.strip()
        try:
            return json.loads(json_text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON from AI response: {str(e)}")
            raise ValueError("AI response is not valid JSON") from e

    async def _make_request(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs,
    ) -> Dict:
        """
        Make a chat completion request.

        Raises:
            HTTPException: If the service is unconfigured or the request fails
        """
        if not self.is_configured():
            raise HTTPException(
                status_code=500,
                detail="AI service is not configured. Please check API key.",
            )

        try:
            response = await self.client.chat.completions.create(
                model=model or self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
            return response.model_dump()

        except APITimeoutError:
            logger.error("AI API request timed out")
            raise HTTPException(status_code=504, detail="AI service request timed out")
        except RateLimitError as e:
            logger.error(f"AI API rate limited: {e}")
            raise HTTPException(status_code=429, detail="Rate limit exceeded")
        except AuthenticationError as e:
            logger.error(f"AI API authentication failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid API key")
        except APIError as e:
            logger.error(f"AI API request error: {e}")
            raise HTTPException(status_code=500, detail="AI service request failed")

    async def generate_completion(
        self,
        prompt: str,
        system_message: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Generate a single completion and return its text content."""
        messages = [
            {"role": "system", "content": system_message},
            {"role": "user", "content": prompt},
        ]
        response = await self._make_request(
            messages, temperature=temperature, max_tokens=max_tokens
        )
        try:
            return response["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError) as e:
            logger.error(f"Unexpected AI response format: {e}")
            raise HTTPException(status_code=500, detail="Unexpected AI response format")

    async def describe_blend(
        self, titles: List[str], blend_mode: str, intensity: float
    ) -> Dict[str, Any]:
        """
        Describe a blend of artworks. Uses the provider when configured and
        falls back to the deterministic local description otherwise or on failure.
        """
        local = local_blend_description(titles, blend_mode, intensity)
        if not self.is_configured():
            return local

        try:
            description = await self.generate_completion(
                get_blend_description_prompt(titles, blend_mode, intensity),
                ORACLE_SYSTEM_MESSAGE,
                temperature=0.9,
                max_tokens=150,
            )
        except HTTPException as e:
            logger.warning(f"Blend description fell back to local mode: {e.detail}")
            return local

        return {**local, "description": description.strip() or EMPTY_RESPONSE_DESCRIPTION}

    async def analyze_artwork(
        self,
        content: bytes,
        mime_type: str = "image/webp",
        width: Optional[int] = None,
        height: Optional[int] = None,
        file_size: Optional[int] = None,
        file_hash: Optional[str] = None,
        color_palette: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Suggest catalogue metadata for an uploaded artwork."""
        fallback = fallback_analysis(width, height, file_size, file_hash, color_palette)
        if not self.is_configured():
            return fallback

        image_url = f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"
        messages = [
            {"role": "system", "content": VISION_SYSTEM_MESSAGE},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": VISION_USER_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": image_url, "detail": "high"},
                    },
                ],
            },
        ]

        try:
            response = await self._make_request(
                messages,
                model=self.vision_model,
                max_tokens=800,
                response_format={"type": "json_object"},
            )
            data = self._extract_json_from_response(
                response["choices"][0]["message"]["content"] or ""
            )
        except (HTTPException, ValueError, KeyError, IndexError) as e:
            logger.warning(f"Vision analysis fell back to defaults: {e}")
            return fallback

        if not isinstance(data, dict):
            return fallback

        palette = data.get("colorPalette")
        palette = palette[:5] if isinstance(palette, list) and palette else fallback["color_palette"]
        tags = data.get("suggestedTags")
        style = data.get("detectedStyle") or "Digital Art"

        return {
            "title": data.get("title") or "Untitled Artwork",
            "description": data.get("description")
            or "A captivating piece awaiting description...",
            "suggested_tags": tags[:8] if isinstance(tags, list) else [],
            "detected_style": style,
            "mood": data.get("mood") or "Contemplative",
            "color_palette": palette,
            "dominant_color": data.get("dominantColor") or palette[0],
            "price_recommendation": calculate_price_recommendation(
                width, height, file_size, style, len(palette)
            ),
            "confidence": calculate_confidence(data),
        }

    async def generate_image(self, prompt: str) -> Dict[str, Optional[str]]:
        """
        Generate a 1024x1024 image for the prompt.

        Raises:
            HTTPException: 429 on exhausted quota, 400 on a content policy
                rejection, 500 on anything else
        """
        if not self.is_configured():
            raise HTTPException(
                status_code=500,
                detail="AI service is not configured. Please check API key.",
            )

        try:
            response = await self.client.images.generate(
                model=self.image_model,
                prompt=prompt,
                n=1,
                size="1024x1024",
                quality="hd",
                style="vivid",
            )
        except APIError as e:
            code = getattr(e, "code", None)
            logger.error(f"Image generation failed ({code}): {e}")
            if code == "insufficient_quota":
                raise HTTPException(
                    status_code=429,
                    detail="API quota exceeded. Please contact the administrator.",
                )
            if code == "content_policy_violation":
                raise HTTPException(
                    status_code=400,
                    detail="Content policy violation. Please adjust your prompt.",
                )
            raise HTTPException(status_code=500, detail="Failed to generate image")

        image = response.data[0] if response.data else None
        if not image or not image.url:
            raise HTTPException(status_code=500, detail="No image generated")

        return {"image_url": image.url, "revised_prompt": image.revised_prompt}


ai_service = AIService()
