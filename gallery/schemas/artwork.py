# gallery/schemas/artwork.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from gallery.schemas.common import CamelModel, PaginatedResponse


class ArtworkSummary(CamelModel):
    id: int
    slug: str
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    price: Optional[float] = None


class ArtworkResponse(ArtworkSummary):
    category: Optional[str] = None
    medium: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    original_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    color_palette: Optional[List[str]] = None
    ai_suggested_tags: Optional[List[str]] = None
    ai_detected_style: Optional[str] = None
    ai_detected_mood: Optional[str] = None
    ai_confidence: Optional[float] = None
    created_at: datetime


class ArtworkListResponse(PaginatedResponse):
    artworks: List[ArtworkResponse]


# ==================== Upload Pipeline ====================


class UploadedFileInfo(CamelModel):
    id: str
    original_name: str
    filename: str
    original_url: str
    thumbnail_url: str
    file_size: int
    optimized_size: int
    width: int
    height: int
    format: str
    hash: str
    color_palette: List[str] = []
    dominant_color: Optional[str] = None
    metadata: Dict[str, Any] = {}


class AISuggestions(CamelModel):
    title: str
    description: str
    suggested_tags: List[str] = []
    detected_style: Optional[str] = None
    mood: Optional[str] = None
    color_palette: List[str] = []
    dominant_color: Optional[str] = None
    price_recommendation: Dict[str, Any] = {}
    confidence: float = 0.0


class UploadResponse(CamelModel):
    success: bool = True
    file: UploadedFileInfo
    ai_suggestions: AISuggestions


class ArtworkSaveItem(CamelModel):
    file: UploadedFileInfo
    ai_suggestions: Optional[AISuggestions] = None
    category: Optional[str] = None
    medium: Optional[str] = None
    year: Optional[int] = None
    price: Optional[float] = Field(None, gt=0)


class ArtworkSaveRequest(CamelModel):
    artworks: List[ArtworkSaveItem] = Field(..., min_length=1)


class ArtworkSaveError(CamelModel):
    index: int
    filename: Optional[str] = None
    error: str


class ArtworkSaveResponse(CamelModel):
    success: bool
    saved: int
    total: int
    artworks: List[ArtworkResponse]
    errors: List[ArtworkSaveError] = []
