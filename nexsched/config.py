# nexsched/config.py

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    database_url: str = "sqlite:///./nexsched.db"

    # Auth (JWT)
    jwt_secret_key: str = "change-me-later"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    auth_mode: str = "demo"  # demo or credentials

    # External auth/database backend
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Text generation
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"

    http_timeout_seconds: float = 20.0
    booking_enforce_availability: bool = False
    public_base_url: str = "http://localhost:3000"
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=list)

    @property
    def is_prod(self) -> bool:
        return self.env.lower() in {"prod", "production"}

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def load_settings() -> Settings:
    cors_env = os.getenv("CORS_ORIGINS", "")
    return Settings(
        env=os.getenv("ENV", "dev"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./nexsched.db"),
        jwt_secret_key=os.getenv("JWT_SECRET_KEY", "change-me-later"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")),
        auth_mode=os.getenv("AUTH_MODE", "demo").strip().lower(),
        supabase_url=os.getenv("SUPABASE_URL", "").strip(),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY", "").strip(),
        openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
        booking_enforce_availability=_flag("BOOKING_ENFORCE_AVAILABILITY"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=[origin.strip() for origin in cors_env.split(",") if origin.strip()],
    )
