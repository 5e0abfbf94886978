from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "BowlNow"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./bowlnow.db"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5000", "http://127.0.0.1:5000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str) and v:
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return ["http://localhost:5000", "http://127.0.0.1:5000"]

    # Rate limiting (slowapi syntax)
    RATE_LIMIT: str = "120/minute"

    # Stripe (loaded from environment; do not hard-code secrets)
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    STRIPE_CURRENCY: str = "usd"

    # CRM behaviour
    DEFAULT_CLIENT_STATUS: str = "prospect"
    CLIENT_DELETE_POLICY: str = "orphan"  # orphan, cascade

    @field_validator("CLIENT_DELETE_POLICY")
    @classmethod
    def validate_delete_policy(cls, v):
        if v not in ("orphan", "cascade"):
            raise ValueError("CLIENT_DELETE_POLICY must be 'orphan' or 'cascade'")
        return v

    # Dashboard client
    AUTO_SAVE_DEBOUNCE_MS: int = 2000

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
