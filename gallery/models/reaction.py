# gallery/models/reaction.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from gallery.core.database import Base

# Order matters: community summaries list reactions in this order
REACTION_TYPES = ("love", "mind_blown", "cosmic", "transcendent", "mystical")

REACTION_DISPLAY = {
    "love": ("💜", "Love"),
    "mind_blown": ("🤯", "Mind Blown"),
    "cosmic": ("🌌", "Cosmic"),
    "transcendent": ("✨", "Transcendent"),
    "mystical": ("🔮", "Mystical"),
}


class Reaction(Base):
    __tablename__ = "reactions"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    artwork_id = Column(
        Integer,
        ForeignKey("artworks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    type = Column(String(20), nullable=False)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # One row per (user, artwork, type); a user may hold several types at once
    __table_args__ = (
        UniqueConstraint(
            "user_id", "artwork_id", "type", name="unique_user_artwork_reaction"
        ),
    )

    def __repr__(self):
        return f"<Reaction(artwork_id={self.artwork_id}, user_id={self.user_id}, type='{self.type}')>"
