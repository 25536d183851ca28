"""
Runtime configuration, read from the environment (and `.env` when present).
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",  # Vite dev server
    "http://localhost:3000",
    "http://localhost:5050",
]


def env_bool(name: str, default: bool = False) -> bool:
    """
    Parse a boolean environment variable.

    Accepted truthy: 1, true, yes, on. Anything else set is false;
    unset returns `default`.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


def env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """
    Application settings.

    Secrets (JWT_SECRET, DATABASE_URL credentials) come from the environment
    only; nothing here ships a usable default for them.
    """

    jwt_secret: str
    database_url: Optional[str] = None
    token_expiration_minutes: Optional[int] = None
    require_create_access: bool = False
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    port: int = 5050
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            RuntimeError: If JWT_SECRET is missing.
        """
        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            raise RuntimeError("JWT_SECRET is missing. Set it in .env")

        return cls(
            jwt_secret=jwt_secret,
            database_url=os.getenv("DATABASE_URL"),
            token_expiration_minutes=env_int("TOKEN_EXPIRATION_MINUTES"),
            require_create_access=env_bool("REQUIRE_CREATE_ACCESS"),
            cors_origins=env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
            port=int(os.getenv("GATEWAY_PORT", 5050)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
