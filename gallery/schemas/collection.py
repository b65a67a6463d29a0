from typing import Dict, List, Literal, Optional

from pydantic import Field

from gallery.schemas.artwork import ArtworkSummary
from gallery.schemas.common import CamelModel


class CollectionState(CamelModel):
    artworks: List[ArtworkSummary]
    count: int
    max_items: int
    can_synthesize: bool


class CollectionSynthesizeRequest(CamelModel):
    user_prompt: Optional[str] = Field(None, max_length=1000)
    style: Literal["psychedelic", "quantum", "cosmic", "transcendent"] = "cosmic"
    # artwork id -> weight; normalised to 100 before use
    percentages: Optional[Dict[int, int]] = None


class CollectionSynthesizeResponse(CamelModel):
    success: bool = True
    prompt: str
    image_url: str
    revised_prompt: Optional[str] = None


class TranceState(CamelModel):
    trance_mode: bool
    prompt_dismissed: bool
    engagement_score: int
    show_prompt: bool


class TranceActionRequest(CamelModel):
    action: Literal["enable", "disable", "dismiss", "engage"]
    reduced_motion: bool = False
