# gallery/services/community.py
import logging
from typing import Dict, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, joinedload

from gallery.core.config import settings
from gallery.core.decorator import (
    ModerationRejected,
    NotFound,
    ValidationFailed,
    db_exception,
)
from gallery.models.artwork import Artwork
from gallery.models.comment import Comment
from gallery.models.comment_like import CommentLike
from gallery.models.reaction import REACTION_DISPLAY, REACTION_TYPES, Reaction
from gallery.models.user import User

logger = logging.getLogger(__name__)


def insert_or_delete(db: Session, row, existing: Query) -> bool:
    """
    Toggle a row keyed by a unique constraint.

    The insert is attempted first; a unique-constraint violation means the row
    already exists, so it is deleted instead. There is no read before the
    write, so two concurrent toggles cannot both insert.

    Returns:
        True if the row was inserted, False if it was removed
    """
    try:
        db.add(row)
        db.commit()
        return True
    except IntegrityError:
        db.rollback()

    existing.delete(synchronize_session=False)
    db.commit()
    return False


def contains_banned_word(text: str, banned_words: List[str]) -> bool:
    lowered = text.lower()
    return any(word and word.lower() in lowered for word in banned_words)


def validate_comment_content(content: Optional[str]) -> str:
    """
    Trim and check a comment body.

    Raises:
        ValidationFailed: missing content or trimmed length outside 1..max
        ModerationRejected: content contains a banned word
    """
    if content is None:
        raise ValidationFailed("Comment content is required")

    trimmed = content.strip()
    max_length = settings.comment_max_length
    if not 1 <= len(trimmed) <= max_length:
        raise ValidationFailed(f"Comment must be between 1 and {max_length} characters")

    if contains_banned_word(trimmed, settings.banned_words):
        raise ModerationRejected()

    return trimmed


class CommunityService:
    def __init__(self, db: Session):
        self.db = db

    def _get_artwork(self, artwork_id: int) -> Artwork:
        artwork = self.db.query(Artwork).filter(Artwork.id == artwork_id).first()
        if not artwork:
            raise NotFound("Artwork not found")
        return artwork

    def _get_comment(self, comment_id: int) -> Comment:
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise NotFound("Comment not found")
        return comment

    # ==================== Reactions ====================

    def toggle_reaction(self, user_id: int, artwork_id: int, reaction_type: str) -> dict:
        """Add the reaction if absent, remove it if present; return fresh state."""
        if reaction_type not in REACTION_TYPES:
            raise ValidationFailed("Invalid reaction type")

        self._get_artwork(artwork_id)

        selected = insert_or_delete(
            self.db,
            Reaction(user_id=user_id, artwork_id=artwork_id, type=reaction_type),
            self.db.query(Reaction).filter(
                Reaction.user_id == user_id,
                Reaction.artwork_id == artwork_id,
                Reaction.type == reaction_type,
            ),
        )

        count = (
            self.db.query(func.count(Reaction.id))
            .filter(Reaction.artwork_id == artwork_id, Reaction.type == reaction_type)
            .scalar()
        )

        logger.info(
            f"User {user_id} {'added' if selected else 'removed'} "
            f"'{reaction_type}' on artwork {artwork_id}"
        )
        return {"type": reaction_type, "count": count, "is_selected": selected}

    # ==================== Comment Likes ====================

    def toggle_comment_like(self, user_id: int, comment_id: int) -> dict:
        self._get_comment(comment_id)

        liked = insert_or_delete(
            self.db,
            CommentLike(user_id=user_id, comment_id=comment_id),
            self.db.query(CommentLike).filter(
                CommentLike.user_id == user_id, CommentLike.comment_id == comment_id
            ),
        )

        likes = (
            self.db.query(func.count(CommentLike.id))
            .filter(CommentLike.comment_id == comment_id)
            .scalar()
        )
        return {"likes": likes, "is_liked": liked}

    # ==================== Comments ====================

    @db_exception
    def create_comment(self, user: User, artwork_id: int, content: Optional[str]) -> dict:
        trimmed = validate_comment_content(content)
        self._get_artwork(artwork_id)

        comment = Comment(user_id=user.id, artwork_id=artwork_id, content=trimmed)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)

        logger.info(f"Comment {comment.id} created by user {user.id} on artwork {artwork_id}")
        return self._serialize_comment(comment, user, likes=0, is_liked=False)

    @staticmethod
    def _serialize_comment(comment: Comment, author: User, likes: int, is_liked: bool) -> dict:
        return {
            "id": comment.id,
            "user": {"name": author.name, "email": author.email},
            "content": comment.content,
            "created_at": comment.created_at,
            "likes": likes,
            "is_liked": is_liked,
        }

    # ==================== Aggregation ====================

    def _like_counts(self, comment_ids: List[int]) -> Dict[int, int]:
        if not comment_ids:
            return {}
        rows = (
            self.db.query(CommentLike.comment_id, func.count(CommentLike.id))
            .filter(CommentLike.comment_id.in_(comment_ids))
            .group_by(CommentLike.comment_id)
            .all()
        )
        return {comment_id: count for comment_id, count in rows}

    def _liked_by(self, user_id: Optional[int], comment_ids: List[int]) -> Set[int]:
        if not user_id or not comment_ids:
            return set()
        rows = (
            self.db.query(CommentLike.comment_id)
            .filter(
                CommentLike.user_id == user_id,
                CommentLike.comment_id.in_(comment_ids),
            )
            .all()
        )
        return {row[0] for row in rows}

    def get_community(self, artwork_id: int, viewer_id: Optional[int] = None) -> dict:
        """
        Comments (newest first) with like counts, all five reaction types with
        counts, and totals. Viewer-specific flags are set when viewer_id is given.
        """
        self._get_artwork(artwork_id)

        comments = (
            self.db.query(Comment)
            .options(joinedload(Comment.user))
            .filter(Comment.artwork_id == artwork_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )
        comment_ids = [c.id for c in comments]
        like_counts = self._like_counts(comment_ids)
        liked = self._liked_by(viewer_id, comment_ids)

        reaction_counts = dict(
            self.db.query(Reaction.type, func.count(Reaction.id))
            .filter(Reaction.artwork_id == artwork_id)
            .group_by(Reaction.type)
            .all()
        )

        selected: Set[str] = set()
        if viewer_id:
            selected = {
                row[0]
                for row in self.db.query(Reaction.type)
                .filter(Reaction.artwork_id == artwork_id, Reaction.user_id == viewer_id)
                .all()
            }

        reactions = []
        for reaction_type in REACTION_TYPES:
            emoji, label = REACTION_DISPLAY[reaction_type]
            reactions.append(
                {
                    "type": reaction_type,
                    "emoji": emoji,
                    "label": label,
                    "count": reaction_counts.get(reaction_type, 0),
                    "is_selected": reaction_type in selected,
                }
            )

        return {
            "comments": [
                self._serialize_comment(
                    c, c.user, like_counts.get(c.id, 0), c.id in liked
                )
                for c in comments
            ],
            "reactions": reactions,
            "stats": {
                "total_comments": len(comments),
                "total_reactions": sum(r["count"] for r in reactions),
            },
        }
