"""
Configuration management for the StyleAI backend
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_AI_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
PRODUCT_SEARCH_STRATEGIES = ("deterministic", "generative")


class Settings:
    """Application settings and configuration"""

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database Configuration (keyed record store for profiles, wardrobe, saved looks)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./styleai.db")

    # Comma-separated list of allowed origins; "*" keeps CORS fully permissive
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Upstream multimodal AI gateway (OpenAI-compatible chat completions)
    AI_GATEWAY_API_KEY: str = os.getenv("AI_GATEWAY_API_KEY", "")
    AI_GATEWAY_URL: str = os.getenv("AI_GATEWAY_URL", DEFAULT_AI_GATEWAY_URL)
    AI_TEXT_MODEL: str = os.getenv("AI_TEXT_MODEL", "google/gemini-2.5-flash")
    AI_IMAGE_MODEL: str = os.getenv("AI_IMAGE_MODEL", "google/gemini-2.5-flash-image-preview")
    UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

    # Image upload settings
    MAX_IMAGE_BYTES: int = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))  # decoded size, 5MB default

    # Feature flags
    ILLUSTRATE_OUTFITS: bool = os.getenv("ILLUSTRATE_OUTFITS", "true").lower() == "true"
    PRODUCT_SEARCH_STRATEGY: str = os.getenv("PRODUCT_SEARCH_STRATEGY", "deterministic").lower()
    USE_CLOUDINARY: bool = os.getenv("USE_CLOUDINARY", "true").lower() == "true"

    # Cloudinary Configuration (object storage for uploaded wardrobe images)
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY: str = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET: str = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_FOLDER: str = os.getenv("CLOUDINARY_FOLDER", "styleai_wardrobe")

    @property
    def ai_gateway_configured(self) -> bool:
        """Check if the upstream AI credential is present"""
        return bool(self.AI_GATEWAY_API_KEY)

    @property
    def cloudinary_configured(self) -> bool:
        """Check if Cloudinary is properly configured"""
        return bool(
            self.CLOUDINARY_CLOUD_NAME
            and self.CLOUDINARY_API_KEY
            and self.CLOUDINARY_API_SECRET
        )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in ("development", "dev", "local")

    @property
    def cors_origins(self) -> list:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
