# shop/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from functools import lru_cache


class Settings(BaseSettings):
    ENV: str = "development"
    DATA_DIR: Path = Path("data")  # where CSV / XLSX tables live
    USERS_FILE: str = "users.csv"
    ACTIVATIONS_FILE: str = "activations.csv"
    ITEMS_FILE: str = "items.csv"
    ENCHANTMENTS_FILE: str = "enchantments.csv"
    ENCHANTMENT_ITEMS_FILE: str = "enchantment_items.csv"

    # canonical storage for item images (browse + upload)
    image_dir: str = "static/images"
    IMAGE_HASH_ALGORITHM: str = "sha256"

    SECRET_KEY: str = "change-this-in-prod"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "adminpass"  # change for prod
    ADMIN_EMAIL: str = "admin@example.com"

    # comma separated, e.g. CORS_ORIGINS=http://localhost:3000,https://shop.example.com
    CORS_ORIGINS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
