# gallery/models/collection_item.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.sql import func

from gallery.core.database import Base


class CollectionItem(Base):
    """An artwork a user has channelled into their blend collection."""

    __tablename__ = "collection_items"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    artwork_id = Column(
        Integer, ForeignKey("artworks.id", ondelete="CASCADE"), nullable=False
    )
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "artwork_id", name="unique_user_collection_item"),
    )

    def __repr__(self):
        return f"<CollectionItem(user_id={self.user_id}, artwork_id={self.artwork_id})>"
