# gallery/routers/printing.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gallery.core.database import get_db
from gallery.core.dependencies import get_current_admin
from gallery.models.user import User
from gallery.schemas.printing import (
    PrintCatalogResponse,
    PrintCreateRequest,
    PrintCreateResponse,
)
from gallery.services.printing import PrintService, get_catalog

router = APIRouter(prefix="/print", tags=["Print on Demand"])


@router.get("/products", response_model=PrintCatalogResponse)
def get_print_products():
    return get_catalog()


@router.post("/create", response_model=PrintCreateResponse)
async def create_print_products(
    payload: PrintCreateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Publish an artwork as print products with the providers. Admin only."""
    return await PrintService(db).create_products(payload)
