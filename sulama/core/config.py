"""
Configuration helpers for the Sulama Asistanı backend.

Routers and services read a Settings object instead of fetching os.environ
directly. Values come from the environment, optionally seeded by a .env file.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parents[2]

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    openai_api_key: str
    openai_base_url: str | None
    openai_timeout_s: float
    chat_model: str
    classifier_model: str
    admin_key: str
    users_file: Path
    data_dir: Path
    public_dir: Path
    pdf_font_path: str
    cors_origins: tuple[str, ...]
    chat_rate_limit: int
    auth_rate_limit: int
    log_level: str
    log_json: bool
    host: str
    port: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str | None, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _path(name: str, default: Path) -> Path:
        raw = (os.getenv(name) or "").strip()
        return Path(raw) if raw else default

    origins = tuple(o.strip() for o in (os.getenv("CORS_ORIGINS") or "").split(",") if o.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        openai_timeout_s=_float(os.getenv("OPENAI_TIMEOUT_S"), 60.0),
        chat_model=os.getenv("CHAT_MODEL", "gpt-5.1"),
        classifier_model=os.getenv("CLASSIFIER_MODEL", "gpt-4.1-mini"),
        admin_key=os.getenv("ADMIN_KEY", ""),
        users_file=_path("USERS_FILE", BASE_DIR / "users.json"),
        data_dir=_path("DATA_DIR", BASE_DIR / "data"),
        public_dir=_path("PUBLIC_DIR", BASE_DIR / "public"),
        pdf_font_path=os.getenv("PDF_FONT_PATH", ""),
        cors_origins=origins,
        chat_rate_limit=_int(os.getenv("CHAT_RATE_LIMIT"), 20),
        auth_rate_limit=_int(os.getenv("AUTH_RATE_LIMIT"), 10),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_json=_bool(os.getenv("LOG_JSON"), False),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT"), 3000),
    )
