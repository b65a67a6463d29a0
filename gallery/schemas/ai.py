from typing import Any, List, Optional

from gallery.schemas.common import CamelModel


class DescribeRequest(CamelModel):
    # Loosely typed on purpose: entries are sanitised by the service
    artwork_titles: Optional[List[Any]] = None
    blend_mode: Optional[Any] = None
    intensity: Optional[Any] = None


class MysticalProperties(CamelModel):
    vibrational_freq: str
    dimensional_depth: str
    sacred_geometry: str


class DescribeResponse(CamelModel):
    description: str
    price: str
    mystical_properties: MysticalProperties


class AIStatusResponse(CamelModel):
    status: str
    message: str


class SynthesizeRequest(CamelModel):
    prompt: Optional[str] = None


class SynthesizeResponse(CamelModel):
    success: bool = True
    image_url: str
    revised_prompt: Optional[str] = None
