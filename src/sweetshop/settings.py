"""
sweetshop.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Expose the administrator allow-list as a normalized, immutable set.
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_identity(raw: str) -> str:
    # Identities are compared case-insensitively (email semantics).
    return raw.strip().lower()


class Settings(BaseSettings):
    """
    Process-wide configuration, read once at startup.

    `frozen=True` makes the instance immutable: the signing secret, token lifetime
    and admin allow-list cannot change while the process is serving requests.
    """

    model_config = SettingsConfigDict(env_prefix="SWEETSHOP_", case_sensitive=False, frozen=True)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "sweetshop"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 4000

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "sweetshop"
    jwt_audience: str = "sweetshop-api"
    jwt_secret: str = Field(default="dev-secret-change-me-before-deploying", repr=False)
    token_ttl_minutes: int = Field(default=7 * 24 * 60, ge=1)

    # Comma-separated identities granted is_admin at registration time.
    admin_emails: str = ""
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./sweetshop.db"
    database_timeout_seconds: float = Field(default=5.0, gt=0)

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(minutes=self.token_ttl_minutes)

    @property
    def admin_identities(self) -> frozenset[str]:
        return frozenset(
            normalize_identity(e) for e in self.admin_emails.split(",") if e.strip()
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars on repeated lookups.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read settings from `app.state.settings` (see `api.deps.settings_dep`),
# so an app built with explicit Settings never falls back to the env-driven singleton.
