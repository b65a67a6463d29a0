# gallery/schemas/community.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from gallery.schemas.common import CamelModel

# ==================== Reaction Schemas ====================


class ReactionRequest(CamelModel):
    type: Optional[str] = None


class ReactionToggleResponse(CamelModel):
    success: bool = True
    type: str
    count: int
    is_selected: bool


class ReactionSummary(CamelModel):
    type: str
    emoji: str
    label: str
    count: int = Field(..., ge=0)
    is_selected: bool = False


# ==================== Comment Schemas ====================


class CommentCreate(CamelModel):
    # Trim and length rules are enforced by the service
    content: Optional[str] = None


class CommentAuthor(CamelModel):
    name: str
    email: str


class CommentResponse(CamelModel):
    id: int
    user: CommentAuthor
    content: str
    created_at: datetime
    likes: int = 0
    is_liked: bool = False


class CommentCreateResponse(CamelModel):
    success: bool = True
    comment: CommentResponse


class CommentLikeResponse(CamelModel):
    success: bool = True
    likes: int
    is_liked: bool


# ==================== Aggregation ====================


class CommunityStats(CamelModel):
    total_comments: int
    total_reactions: int


class CommunityResponse(CamelModel):
    comments: List[CommentResponse]
    reactions: List[ReactionSummary]
    stats: CommunityStats
