# gallery/services/collection.py
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from gallery.core.config import settings
from gallery.core.decorator import NotFound, ValidationFailed, db_exception
from gallery.models.artwork import Artwork
from gallery.models.collection_item import CollectionItem
from gallery.models.user import User
from gallery.utils.ai import ai_service
from gallery.utils.prompts import get_synthesis_prompt

logger = logging.getLogger(__name__)

MIN_SYNTHESIS_ITEMS = 2


def split_percentages(
    artwork_ids: List[int], weights: Optional[Dict[int, int]] = None
) -> Dict[int, int]:
    """
    Share 100% between the artworks. Without weights the split is even; with
    weights they are normalised. Rounding leftovers go to the first artwork.
    """
    if not artwork_ids:
        return {}

    raw = [max(0, (weights or {}).get(i, 0)) for i in artwork_ids]
    total = sum(raw)
    if total <= 0:
        shares = [100 // len(artwork_ids)] * len(artwork_ids)
    else:
        shares = [w * 100 // total for w in raw]

    shares[0] += 100 - sum(shares)
    return dict(zip(artwork_ids, shares))


class CollectionService:
    """A user's blend collection: up to `collection_max_items` channelled artworks."""

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    def _items(self) -> List[CollectionItem]:
        return (
            self.db.query(CollectionItem)
            .options(joinedload(CollectionItem.artwork))
            .filter(CollectionItem.user_id == self.user.id)
            .order_by(CollectionItem.position, CollectionItem.id)
            .all()
        )

    def get_artworks(self) -> List[Artwork]:
        return [item.artwork for item in self._items()]

    def get_state(self) -> dict:
        artworks = self.get_artworks()
        return {
            "artworks": artworks,
            "count": len(artworks),
            "max_items": settings.collection_max_items,
            "can_synthesize": len(artworks) >= MIN_SYNTHESIS_ITEMS,
        }

    def channel(self, artwork_id: int) -> dict:
        """Add an artwork. Channelling one already in the collection is a no-op."""
        if not self.db.query(Artwork.id).filter(Artwork.id == artwork_id).first():
            raise NotFound("Artwork not found")

        in_collection = (
            self.db.query(CollectionItem.id)
            .filter(
                CollectionItem.user_id == self.user.id,
                CollectionItem.artwork_id == artwork_id,
            )
            .first()
        )
        if in_collection:
            return self.get_state()

        count, last_position = (
            self.db.query(func.count(CollectionItem.id), func.max(CollectionItem.position))
            .filter(CollectionItem.user_id == self.user.id)
            .one()
        )
        if count >= settings.collection_max_items:
            raise ValidationFailed(
                f"Collection is full ({settings.collection_max_items} artworks maximum)"
            )

        self.db.add(
            CollectionItem(
                user_id=self.user.id,
                artwork_id=artwork_id,
                position=(last_position or 0) + 1,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()

        logger.info(f"User {self.user.id} channelled artwork {artwork_id}")
        return self.get_state()

    @db_exception
    def unchannel(self, artwork_id: int) -> dict:
        self.db.query(CollectionItem).filter(
            CollectionItem.user_id == self.user.id,
            CollectionItem.artwork_id == artwork_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        return self.get_state()

    @db_exception
    def clear(self) -> dict:
        self.db.query(CollectionItem).filter(
            CollectionItem.user_id == self.user.id
        ).delete(synchronize_session=False)
        self.db.commit()
        logger.info(f"User {self.user.id} cleared their collection")
        return self.get_state()

    def build_blend_prompt(
        self,
        user_prompt: Optional[str],
        style: str,
        weights: Optional[Dict[int, int]] = None,
    ) -> str:
        artworks = self.get_artworks()
        if len(artworks) < MIN_SYNTHESIS_ITEMS:
            raise ValidationFailed(
                f"At least {MIN_SYNTHESIS_ITEMS} artworks are needed to synthesize"
            )

        shares = split_percentages([a.id for a in artworks], weights)
        lines = [
            f'{shares[a.id]}% of "{a.title}": {a.description or "a cosmic artwork"}'
            for a in artworks
        ]
        return get_synthesis_prompt(lines, (user_prompt or "").strip(), style)

    async def synthesize(
        self,
        user_prompt: Optional[str],
        style: str,
        weights: Optional[Dict[int, int]] = None,
    ) -> dict:
        prompt = self.build_blend_prompt(user_prompt, style, weights)
        result = await ai_service.generate_image(prompt)
        logger.info(f"Synthesized collection blend for user {self.user.id}")
        return {"success": True, "prompt": prompt, **result}


class TranceService:
    """Per-user trance mode preference and the engagement-driven invitation."""

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    def get_state(self, reduced_motion: bool = False) -> dict:
        user = self.user
        show_prompt = (
            not user.trance_mode
            and not user.trance_prompt_dismissed
            and not reduced_motion
            and user.engagement_score > settings.trance_engagement_threshold
        )
        return {
            "trance_mode": user.trance_mode,
            "prompt_dismissed": user.trance_prompt_dismissed,
            "engagement_score": user.engagement_score,
            "show_prompt": show_prompt,
        }

    def apply(self, action: str, reduced_motion: bool = False) -> dict:
        user = self.user
        if action == "enable":
            user.trance_mode = True
        elif action == "disable":
            user.trance_mode = False
        elif action == "dismiss":
            user.trance_prompt_dismissed = True
        elif action == "engage":
            user.engagement_score = User.engagement_score + 1
        else:
            raise ValidationFailed("Invalid trance action")

        self.db.commit()
        self.db.refresh(user)
        return self.get_state(reduced_motion)
