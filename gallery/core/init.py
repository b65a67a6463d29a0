"""
Application initialization module
Handles initial setup tasks like creating the default gallery admin
"""

import logging

from sqlalchemy.orm import Session

from gallery.core.config import settings
from gallery.core.hasher import PasswordHelper
from gallery.models.user import ADMIN_ROLE, User

logger = logging.getLogger(__name__)


def init_admin(db: Session) -> None:
    """
    Create the default admin account if no admin exists yet.

    Credentials come from settings (config.py).

    Args:
        db: Database session
    """
    try:
        existing_admin = db.query(User).filter(User.role == ADMIN_ROLE).first()

        if existing_admin:
            logger.info(
                f"✅ Admin user already exists (ID: {existing_admin.id}, Email: {existing_admin.email})"
            )
            return

        email = settings.admin_default_email.lower()
        admin = db.query(User).filter(User.email == email).first()
        if admin:
            # Promote an existing account that owns the configured admin email
            admin.role = ADMIN_ROLE
        else:
            admin = User(
                name=settings.admin_default_name,
                email=email,
                hashed_password=PasswordHelper.hash_password(
                    settings.admin_default_password
                ),
                role=ADMIN_ROLE,
            )
            db.add(admin)

        db.commit()
        db.refresh(admin)

        logger.info("=" * 60)
        logger.info("🎉 GALLERY ADMIN CREATED SUCCESSFULLY!")
        logger.info("=" * 60)
        logger.info(f"Email: {admin.email}")
        logger.info("=" * 60)
        logger.warning("⚠️  IMPORTANT: Change the default password immediately!")
        logger.info("=" * 60)

    except Exception as e:
        logger.error(f"❌ Failed to initialize admin: {e}")
        db.rollback()
        raise


def initialize_application(db: Session) -> None:
    """
    Run all application initialization tasks.

    Args:
        db: Database session
    """
    logger.info("🚀 Starting application initialization...")

    init_admin(db)

    logger.info("✅ Application initialization completed!")
