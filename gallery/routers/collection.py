# gallery/routers/collection.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gallery.core.database import get_db
from gallery.core.dependencies import get_current_user
from gallery.models.user import User
from gallery.schemas.collection import (
    CollectionState,
    CollectionSynthesizeRequest,
    CollectionSynthesizeResponse,
    TranceActionRequest,
    TranceState,
)
from gallery.services.collection import CollectionService, TranceService

router = APIRouter(tags=["Collection"])


# ==================== Collection ====================


@router.get("/collection", response_model=CollectionState)
def get_collection(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CollectionService(db, current_user).get_state()


@router.delete("/collection", response_model=CollectionState)
def clear_collection(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CollectionService(db, current_user).clear()


@router.post("/collection/synthesize", response_model=CollectionSynthesizeResponse)
async def synthesize_collection(
    payload: CollectionSynthesizeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Blend the channelled artworks into a new generated image."""
    return await CollectionService(db, current_user).synthesize(
        payload.user_prompt, payload.style, payload.percentages
    )


@router.post("/collection/{artwork_id}", response_model=CollectionState)
def channel_artwork(
    artwork_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CollectionService(db, current_user).channel(artwork_id)


@router.delete("/collection/{artwork_id}", response_model=CollectionState)
def unchannel_artwork(
    artwork_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CollectionService(db, current_user).unchannel(artwork_id)


# ==================== Trance Mode ====================


@router.get("/me/trance", response_model=TranceState)
def get_trance_state(
    reduced_motion: bool = Query(False, alias="reducedMotion"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return TranceService(db, current_user).get_state(reduced_motion)


@router.post("/me/trance", response_model=TranceState)
def update_trance_state(
    payload: TranceActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return TranceService(db, current_user).apply(payload.action, payload.reduced_motion)
