# gallery/services/printing.py
import logging
from typing import List

from sqlalchemy.orm import Session

from gallery.core.decorator import NotFound
from gallery.models.artwork import Artwork
from gallery.schemas.printing import PrintCreateRequest
from gallery.utils.printing import PRODUCT_CATALOG, PrintProviderError, print_manager

logger = logging.getLogger(__name__)


def get_catalog() -> dict:
    product_types = [{"type": key, **value} for key, value in PRODUCT_CATALOG.items()]
    return {
        "product_types": product_types,
        "total_types": len(product_types),
        "recommended": [p for p in product_types if p["recommended"]],
    }


class PrintService:
    def __init__(self, db: Session):
        self.db = db

    async def create_products(self, request: PrintCreateRequest) -> dict:
        """Publish each requested product type; failures are collected, not raised."""
        if not self.db.query(Artwork.id).filter(Artwork.id == request.artwork_id).first():
            raise NotFound("Artwork not found")

        results: List[dict] = []
        for product_type in request.product_types:
            if product_type not in PRODUCT_CATALOG:
                results.append(
                    {
                        "product_type": product_type,
                        "success": False,
                        "error": "Unknown product type",
                    }
                )
                continue

            try:
                ids = await print_manager.create_product_on_all_platforms(
                    request.artwork_url, product_type, request.artwork_title
                )
                results.append({"product_type": product_type, "success": True, **ids})
            except PrintProviderError as e:
                logger.error(f"Failed to create {product_type} for artwork {request.artwork_id}: {e}")
                results.append({"product_type": product_type, "success": False, "error": str(e)})

        successful = sum(1 for r in results if r["success"])
        logger.info(
            f"Created {successful}/{len(results)} print products for artwork {request.artwork_id}"
        )
        return {
            "success": successful > 0,
            "message": f"Created {successful}/{len(results)} print products successfully",
            "results": results,
            "artwork_id": request.artwork_id,
            "summary": {
                "total": len(results),
                "successful": successful,
                "failed": len(results) - successful,
            },
        }
