from pathlib import Path
from typing import Annotated, List

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode

BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="Cosmic Gallery")
    app_description: str = Field(default="Art gallery storefront and community API")
    app_version: str = Field(default="1.0.0")
    app_url: str = Field(default="http://localhost:8000")
    frontend_url: str = Field(default="http://localhost:3000")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)

    # Database Configuration
    database_url: str = Field(default="")
    db_connection: str = Field(default="postgresql")
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="cosmic-gallery")
    db_username: str = Field(default="gallery")
    db_password: str = Field(default="gallery")

    # Security Settings
    cors_allowed_origins: Annotated[List[str], NoDecode] = Field(default=["http://localhost:3000"])
    password_hash_rounds: int = Field(default=12)

    # JWT Configuration
    jwt_secret: str = Field(default="your-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_user_expiration: int = Field(default=7)
    jwt_refresh_expiration: int = Field(default=30)
    jwt_admin_expiration: int = Field(default=1)
    jwt_issuer: str = Field(default="Cosmic Gallery")

    # Rate limits (slowapi notation)
    redis_url: str = Field(default="")
    comment_rate_limit: str = Field(default="3/minute")
    register_rate_limit: str = Field(default="5/15minutes")
    upload_rate_limit: str = Field(default="5/minute")

    # Moderation
    banned_words: Annotated[List[str], NoDecode] = Field(default=["spam", "scam", "fake"])
    comment_max_length: int = Field(default=500)

    # Email (SMTP)
    mail_host: str = Field(default="")
    mail_port: int = Field(default=587)
    mail_username: str = Field(default="")
    mail_password: str = Field(default="")
    mail_encryption: str = Field(default="tls")
    mail_from_address: str = Field(default="no-reply@cosmic-gallery.art")
    mail_from_name: str = Field(default="Cosmic Gallery")
    admin_notification_email: str = Field(default="")

    # File Uploads
    max_upload_size_mb: int = Field(default=50)
    upload_dir: str = Field(default="storage")
    image_min_dimension: int = Field(default=100)
    image_max_dimension: int = Field(default=8192)
    image_optimized_max: int = Field(default=2048)
    image_thumbnail_max: int = Field(default=400)
    image_quality: int = Field(default=85)

    # Pagination
    default_page_size: int = Field(default=12)
    max_page_size: int = Field(default=100)

    # Admin Defaults
    admin_default_name: str = Field(default="Gallery Admin")
    admin_default_email: str = Field(default="admin@cosmic-gallery.art")
    admin_default_password: str = Field(default="Admin@12345")

    # Payment (Stripe)
    stripe_secret_key: str = Field(default="")
    stripe_webhook_secret: str = Field(default="")
    payment_currency: str = Field(default="usd")
    shipping_countries: Annotated[List[str], NoDecode] = Field(
        default=["US", "CA", "GB", "AU", "DE", "FR", "ES", "IT"]
    )

    # Print-on-demand providers
    printful_api_key: str = Field(default="")
    printful_store_id: str = Field(default="")
    printify_api_key: str = Field(default="")
    printify_shop_id: str = Field(default="")
    print_provider_timeout: float = Field(default=30.0)

    # Telegram admin notifications
    telegram_bot_token: str = Field(default="")
    telegram_admin_chat_id: str = Field(default="")
    telegram_notification_enabled: bool = Field(default=False)

    # AI Service
    ai_api_key: str = Field(default="")
    ai_api_endpoint: str = Field(default="")
    ai_model: str = Field(default="gpt-4o-mini")
    ai_vision_model: str = Field(default="gpt-4o")
    ai_image_model: str = Field(default="dall-e-3")
    ai_timeout: float = Field(default=60.0)

    # Collection
    collection_max_items: int = Field(default=5)
    trance_engagement_threshold: int = Field(default=20)

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:3000"])

    @field_validator("banned_words", mode="before")
    def validate_banned_words(cls, v):
        return [w.lower() for w in cls._parse_csv(v, ["spam", "scam", "fake"])]

    @field_validator("shipping_countries", mode="before")
    def validate_shipping_countries(cls, v):
        return [c.upper() for c in cls._parse_csv(v, ["US", "CA", "GB"])]

    @property
    def environment(self) -> str:
        return "production" if self.production else "development"

    @property
    def storage_path(self) -> Path:
        """Upload directory; relative values are resolved against the project root."""
        path = Path(self.upload_dir)
        return path if path.is_absolute() else BASE_DIR / path

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        settings = Settings()
        print("✅ Settings loaded successfully!")
        return settings
    except ValidationError as e:
        print("❌ Validation Error:", e)
        raise


settings = load_settings()
