# recipe_book/config.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = _env("MONGO_URI", "MONGODB_URI", default="mongodb://localhost:27017")
    mongo_db: str = _env("MONGO_DB", "MONGODB_DB", default="recipe_book")
    token_secret: str = _env("TOKEN_SECRET", default="recipe-book-secret-change-in-production")
    token_max_age: int = int(_env("TOKEN_MAX_AGE", default="3600"))
    cors_origins: str = _env("CORS_ORIGINS", default="*")
    log_level: str = _env("LOG_LEVEL", default="INFO")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str = _env("GEMINI_API_KEY")
    model: str = _env("GEMINI_MODEL", default="gemini-2.5-flash")
    timeout: float = float(_env("GEMINI_TIMEOUT", default="30"))


SETTINGS = Settings()
DEFAULT_GEMINI_CONFIG = GeminiConfig()


def get_settings() -> Settings:
    return SETTINGS


def get_gemini_config() -> GeminiConfig:
    return DEFAULT_GEMINI_CONFIG
