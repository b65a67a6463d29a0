# gallery/utils/prompts.py
"""
Prompt templates for the gallery's AI features.
"""

from typing import List

# ============================================
# BLEND DESCRIPTIONS
# ============================================

ORACLE_SYSTEM_MESSAGE = (
    "You are a mystical art oracle for a consciousness-focused gallery. "
    "Create poetic, esoteric descriptions for art remixes. Be creative, use "
    "cosmic/psychedelic language, and reference consciousness, sacred geometry, "
    "and interdimensional themes."
)


def get_blend_description_prompt(
    titles: List[str], blend_mode: str, intensity: float
) -> str:
    return (
        f"Create a mystical description for a {blend_mode} blend of these artworks: "
        f"{', '.join(titles)} at {format_intensity(intensity)}% intensity."
    )


def get_local_blend_descriptions(
    titles: List[str], blend_mode: str, intensity: float
) -> List[str]:
    """Templated descriptions used when no AI provider is available."""
    return [
        f"A fusion of {' and '.join(titles)}, where cosmic energies dance in {blend_mode} harmony",
        f"The consciousness streams of {', '.join(titles)} merge into a singular vision of interdimensional beauty",
        f"Through {blend_mode} alchemy, {' & '.join(titles)} transcend physical form to become pure expression",
        f"In this {format_intensity(intensity)}% intensity blend, {' meets '.join(titles)} to birth new realities",
    ]


def format_intensity(intensity: float) -> str:
    """Render 40.0 as '40' and 40.5 as '40.5'."""
    return f"{intensity:g}"


# ============================================
# VISION ANALYSIS
# ============================================

VISION_SYSTEM_MESSAGE = """You are an expert art curator and analyst for a consciousness-focused art gallery.

Analyze the artwork and provide a JSON response with:
1. title: A mystical, evocative title (2-5 words)
2. description: A poetic description (2-3 sentences) that captures the artwork's essence and spiritual resonance
3. suggestedTags: Array of 5-8 relevant tags (lowercase, no #)
4. detectedStyle: Art style (e.g., "Abstract", "Oil Painting", "Mixed Media", "Digital Art")
5. mood: Emotional tone (e.g., "Transcendent", "Calm", "Energetic", "Mystical")
6. colorPalette: Array of 3-5 dominant hex colors
7. dominantColor: Primary hex color

Important: Return ONLY valid JSON, no markdown or explanations."""

VISION_USER_PROMPT = "Analyze this artwork for our consciousness art gallery:"


# ============================================
# IMAGE SYNTHESIS
# ============================================


def get_synthesis_prompt(blend_lines: List[str], user_prompt: str, style: str) -> str:
    """
    Full image-generation prompt for a collection blend.

    Args:
        blend_lines: One '<pct>% of "<title>": <description>' line per artwork
        user_prompt: Optional extra direction from the user
        style: psychedelic, quantum, cosmic or transcendent
    """
    vision = user_prompt or "A harmonious blend of cosmic energies"
    return (
        "Create a mystical artwork that synthesizes these pieces:\n\n"
        + "\n".join(blend_lines)
        + f"\n\nAdditional vision: {vision}\n\n"
        f"Style: {style} abstract expressionism with sacred geometry and ethereal "
        "lighting. High detail, vibrant colors, consciousness art."
    )
