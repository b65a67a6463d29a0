# gallery/routers/community.py
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from gallery.core.config import settings
from gallery.core.database import get_db
from gallery.core.dependencies import get_current_user, get_optional_user
from gallery.core.limiter import limiter
from gallery.models.user import User
from gallery.schemas.community import (
    CommentCreate,
    CommentCreateResponse,
    CommentLikeResponse,
    CommunityResponse,
    ReactionRequest,
    ReactionToggleResponse,
)
from gallery.services.community import CommunityService

router = APIRouter(
    tags=["Community"],
    responses={404: {"description": "Not found"}},
)


@router.post("/artwork/{artwork_id}/reaction", response_model=ReactionToggleResponse)
def toggle_reaction(
    artwork_id: int,
    payload: ReactionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add the reaction if the user has not given it yet, otherwise remove it."""
    result = CommunityService(db).toggle_reaction(current_user.id, artwork_id, payload.type)
    return {"success": True, **result}


@router.post(
    "/artwork/{artwork_id}/comment",
    response_model=CommentCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.comment_rate_limit)
def create_comment(
    request: Request,
    artwork_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = CommunityService(db).create_comment(current_user, artwork_id, payload.content)
    return {"success": True, "comment": comment}


@router.get("/artwork/{artwork_id}/community", response_model=CommunityResponse)
def get_community(
    artwork_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Comments, reaction counts and totals. Viewer flags need a token."""
    viewer_id = current_user.id if current_user else None
    return CommunityService(db).get_community(artwork_id, viewer_id)


@router.post("/comments/{comment_id}/like", response_model=CommentLikeResponse)
def toggle_comment_like(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = CommunityService(db).toggle_comment_like(current_user.id, comment_id)
    return {"success": True, **result}
