# o2o_shop/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Env vars (.env), all optional for local development:
      - DATABASE_URL (SQLite file by default, Postgres in deployment)
      - IMAGE_BASE_DIR (root folder for uploaded product images)
      - JWT_SECRET (HS256 secret used to verify admin tokens)

    Image sizes/qualities follow the storefront layout:
      thumbnail 200x200, gallery ("normal") image 337x640.
    """

    PROJECT_NAME: str = "O2O Shop Backend"
    API_PREFIX: str = ""

    DATABASE_URL: str = "sqlite:///./o2o_shop.db"
    DB_ECHO: bool = False

    # Local image storage
    IMAGE_BASE_DIR: str = "./images"
    THUMBNAIL_SIZE: tuple[int, int] = (200, 200)
    NORMAL_IMAGE_SIZE: tuple[int, int] = (337, 640)
    THUMBNAIL_QUALITY: int = 80
    NORMAL_IMAGE_QUALITY: int = 90
    WATERMARK_PATH: str | None = None
    MAX_PRODUCT_IMAGES: int = 6

    # JWT verification (backend-side)
    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
