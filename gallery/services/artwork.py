# gallery/services/artwork.py
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gallery.core.decorator import NotFound, ValidationFailed, db_exception
from gallery.models.artwork import Artwork
from gallery.models.user import User
from gallery.schemas.artwork import ArtworkSaveItem
from gallery.utils.ai import ai_service
from gallery.utils.file_upload import file_upload_service
from gallery.utils.image import process_image, validate_image

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")
    return slug[:180] or "artwork"


class ArtworkService:
    def __init__(self, db: Session):
        self.db = db

    # ==================== Catalogue ====================

    def get_artworks(
        self,
        page: int = 1,
        size: int = 12,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Tuple[List[Artwork], dict]:
        """Get list of artworks with pagination"""
        query = self.db.query(Artwork)

        if category:
            query = query.filter(Artwork.category == category)

        if search:
            query = query.filter(
                or_(
                    Artwork.title.ilike(f"%{search}%"),
                    Artwork.description.ilike(f"%{search}%"),
                )
            )

        total = query.count()
        offset = (page - 1) * size
        artworks = (
            query.order_by(Artwork.created_at.desc(), Artwork.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )

        return artworks, {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size) if total > 0 else 0,
        }

    def get_artwork(self, artwork_id: int) -> Artwork:
        artwork = self.db.query(Artwork).filter(Artwork.id == artwork_id).first()
        if not artwork:
            raise NotFound("Artwork not found")
        return artwork

    def get_artwork_by_slug(self, slug: str) -> Artwork:
        artwork = self.db.query(Artwork).filter(Artwork.slug == slug).first()
        if not artwork:
            raise NotFound("Artwork not found")
        return artwork

    @db_exception
    def delete_artwork(self, artwork_id: int) -> None:
        artwork = self.get_artwork(artwork_id)
        paths = [artwork.original_url, artwork.thumbnail_url]

        self.db.delete(artwork)
        self.db.commit()

        for path in paths:
            if path:
                file_upload_service.delete_file(path)
        logger.info(f"Artwork {artwork_id} deleted")

    def unique_slug(self, title: str) -> str:
        base = slugify(title)
        slug, suffix = base, 2
        while self.db.query(Artwork.id).filter(Artwork.slug == slug).first():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    # ==================== Upload Pipeline ====================

    async def upload_artwork(
        self, file: UploadFile, metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Validate, optimise and store an uploaded image, then ask the AI for
        catalogue suggestions. Nothing is written to the database here.
        """
        contents = await file.read()
        original_name = file.filename or "upload"

        validated = validate_image(contents, original_name)
        processed = await run_in_threadpool(process_image, contents)

        filename = file_upload_service.generate_secure_filename(validated.file_hash, ".webp")
        original_url = file_upload_service.save_bytes(processed.optimized, "artworks", filename)
        thumbnail_url = file_upload_service.save_bytes(
            processed.thumbnail, "thumbnails", f"thumb_{filename}"
        )

        suggestions = await ai_service.analyze_artwork(
            processed.optimized,
            mime_type="image/webp",
            width=processed.width,
            height=processed.height,
            file_size=len(contents),
            file_hash=validated.file_hash,
            color_palette=processed.color_palette,
        )

        logger.info(
            f"Uploaded '{original_name}' as {filename} "
            f"({len(contents)} -> {len(processed.optimized)} bytes)"
        )

        return {
            "success": True,
            "file": {
                "id": filename.rsplit(".", 1)[0],
                "original_name": file_upload_service.sanitize_filename(original_name),
                "filename": filename,
                "original_url": original_url,
                "thumbnail_url": thumbnail_url,
                "file_size": len(contents),
                "optimized_size": len(processed.optimized),
                "width": processed.width,
                "height": processed.height,
                "format": "webp",
                "hash": validated.file_hash,
                "color_palette": processed.color_palette,
                "dominant_color": processed.dominant_color,
                "metadata": {
                    "source_format": validated.format.lower(),
                    "source_width": validated.width,
                    "source_height": validated.height,
                    **(metadata or {}),
                },
            },
            "ai_suggestions": suggestions,
        }

    def _build_artwork(self, item: ArtworkSaveItem, uploader: User) -> Artwork:
        info = item.file
        ai = item.ai_suggestions

        if not (
            file_upload_service.is_stored_url(info.original_url, "artworks")
            and file_upload_service.is_stored_url(info.thumbnail_url, "thumbnails")
        ):
            raise ValidationFailed("Artwork files must come from an upload")

        title = (ai.title if ai and ai.title else info.original_name).strip()
        if not title:
            raise ValidationFailed("Artwork title is required")

        suggested_price = None
        if ai and ai.price_recommendation:
            suggested_price = ai.price_recommendation.get("suggested")

        return Artwork(
            slug=self.unique_slug(title),
            title=title[:200],
            description=ai.description if ai else None,
            category=item.category,
            medium=item.medium or (ai.detected_style if ai else None),
            year=item.year,
            price=item.price if item.price is not None else suggested_price,
            color=info.dominant_color,
            original_url=info.original_url,
            thumbnail_url=info.thumbnail_url,
            original_filename=info.original_name,
            file_size=info.file_size,
            optimized_size=info.optimized_size,
            width=info.width,
            height=info.height,
            format=info.format,
            file_hash=info.hash,
            color_palette=info.color_palette,
            ai_suggested_title=ai.title if ai else None,
            ai_suggested_description=ai.description if ai else None,
            ai_suggested_tags=ai.suggested_tags if ai else None,
            ai_detected_style=ai.detected_style if ai else None,
            ai_detected_mood=ai.mood if ai else None,
            ai_suggested_price=suggested_price,
            ai_confidence=ai.confidence if ai else None,
            ai_processed_at=datetime.now(timezone.utc) if ai else None,
            uploaded_by=uploader.id,
        )

    def save_artworks(self, items: List[ArtworkSaveItem], uploader: User) -> dict:
        """Persist uploaded artworks one by one; failures are collected, not raised."""
        saved: List[Artwork] = []
        errors: List[dict] = []

        for index, item in enumerate(items):
            try:
                artwork = self._build_artwork(item, uploader)
                self.db.add(artwork)
                self.db.commit()
                self.db.refresh(artwork)
                saved.append(artwork)
            except ValidationFailed as e:
                errors.append(
                    {"index": index, "filename": item.file.filename, "error": e.message}
                )
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to save artwork {item.file.filename}: {e}")
                errors.append(
                    {
                        "index": index,
                        "filename": item.file.filename,
                        "error": "Failed to save artwork",
                    }
                )

        logger.info(f"Saved {len(saved)}/{len(items)} artworks for admin {uploader.id}")
        return {
            "success": len(saved) > 0,
            "saved": len(saved),
            "total": len(items),
            "artworks": saved,
            "errors": errors,
        }
