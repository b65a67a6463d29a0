from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from gallery.core.database import Base

USER_ROLE = "USER"
ADMIN_ROLE = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Authentication fields (email is stored lower-cased)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(
        String(255), nullable=True
    )  # Guest buyers created at checkout have no password

    # Profile
    name = Column(String(100), nullable=False)
    role = Column(String(20), default=USER_ROLE, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Trance mode preferences
    trance_mode = Column(Boolean, default=False, nullable=False)
    trance_prompt_dismissed = Column(Boolean, default=False, nullable=False)
    engagement_score = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    last_login = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
