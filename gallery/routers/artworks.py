from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gallery.core.config import settings
from gallery.core.database import get_db
from gallery.core.dependencies import get_current_admin
from gallery.models.user import User
from gallery.schemas.artwork import ArtworkListResponse, ArtworkResponse
from gallery.services.artwork import ArtworkService

router = APIRouter(
    prefix="/artworks",
    tags=["Artworks"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=ArtworkListResponse)
def list_artworks(
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    search: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Paginated catalogue, newest first."""
    artworks, pagination = ArtworkService(db).get_artworks(page, size, search, category)
    return {"artworks": artworks, **pagination}


# Defined before /{artwork_id} so "slug" is not parsed as an id
@router.get("/slug/{slug}", response_model=ArtworkResponse)
def get_artwork_by_slug(slug: str, db: Session = Depends(get_db)):
    return ArtworkService(db).get_artwork_by_slug(slug)


@router.get("/{artwork_id}", response_model=ArtworkResponse)
def get_artwork(artwork_id: int, db: Session = Depends(get_db)):
    return ArtworkService(db).get_artwork(artwork_id)


@router.delete("/{artwork_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_artwork(
    artwork_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Delete an artwork and its stored files. Admin only."""
    ArtworkService(db).delete_artwork(artwork_id)
