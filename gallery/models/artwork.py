# gallery/models/artwork.py
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from gallery.core.database import Base


class Artwork(Base):
    __tablename__ = "artworks"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(200), unique=True, index=True, nullable=False)

    # Catalogue information
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True, index=True)
    medium = Column(String(100), nullable=True)
    year = Column(Integer, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    color = Column(String(20), nullable=True)  # Dominant colour as hex

    # Stored media (paths relative to the storage mount)
    original_url = Column(String(500), nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    original_filename = Column(String(255), nullable=True)

    # File metadata from the upload pipeline
    file_size = Column(Integer, nullable=True)
    optimized_size = Column(Integer, nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    format = Column(String(20), nullable=True)
    file_hash = Column(String(64), nullable=True, index=True)
    color_palette = Column(JSON, nullable=True)

    # AI-suggested metadata
    ai_suggested_title = Column(String(200), nullable=True)
    ai_suggested_description = Column(Text, nullable=True)
    ai_suggested_tags = Column(JSON, nullable=True)
    ai_detected_style = Column(String(100), nullable=True)
    ai_detected_mood = Column(String(100), nullable=True)
    ai_suggested_price = Column(Numeric(10, 2), nullable=True)
    ai_confidence = Column(Float, nullable=True)
    ai_processed_at = Column(DateTime(timezone=True), nullable=True)

    uploaded_by = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Artwork(id={self.id}, slug='{self.slug}')>"
