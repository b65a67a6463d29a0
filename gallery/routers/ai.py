from fastapi import APIRouter, Depends

from gallery.core.dependencies import get_current_user
from gallery.models.user import User
from gallery.schemas.ai import (
    AIStatusResponse,
    DescribeRequest,
    DescribeResponse,
    SynthesizeRequest,
    SynthesizeResponse,
)
from gallery.services.ai import oracle_service

router = APIRouter(tags=["AI"])


@router.post("/ai-describe", response_model=DescribeResponse)
async def describe_blend(payload: DescribeRequest):
    """Mystical description, price and properties for a blend of artworks."""
    return await oracle_service.describe(payload)


@router.get("/ai-describe", response_model=AIStatusResponse)
async def describe_status():
    return oracle_service.status()


@router.post("/synthesize", response_model=SynthesizeResponse)
async def synthesize(
    payload: SynthesizeRequest,
    current_user: User = Depends(get_current_user),
):
    return await oracle_service.synthesize(payload.prompt)
