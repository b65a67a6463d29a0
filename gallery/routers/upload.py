import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.orm import Session

from gallery.core.config import settings
from gallery.core.database import get_db
from gallery.core.decorator import ValidationFailed
from gallery.core.dependencies import get_current_admin
from gallery.core.limiter import limiter
from gallery.models.user import User
from gallery.schemas.artwork import (
    ArtworkSaveRequest,
    ArtworkSaveResponse,
    UploadResponse,
)
from gallery.services.artwork import ArtworkService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.upload_rate_limit)
async def upload_artwork(
    request: Request,
    file: UploadFile = File(...),
    metadata: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Validate and optimise an image, store it with a thumbnail and return
    AI-suggested catalogue metadata. The artwork is saved separately through
    /artwork/save. Admin only.
    """
    extra = None
    if metadata:
        try:
            extra = json.loads(metadata)
        except json.JSONDecodeError:
            raise ValidationFailed("Invalid metadata JSON")
        if not isinstance(extra, dict):
            raise ValidationFailed("Invalid metadata JSON")

    logger.info(f"Admin {current_admin.id} uploading {file.filename}")
    return await ArtworkService(db).upload_artwork(file, extra)


@router.post("/artwork/save", response_model=ArtworkSaveResponse)
def save_artworks(
    payload: ArtworkSaveRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Bulk-save uploaded artworks. Admin only."""
    return ArtworkService(db).save_artworks(payload.artworks, current_admin)
