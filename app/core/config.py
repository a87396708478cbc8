# app/core/config.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_VERSION = "2024-10"


class AppSettings(BaseSettings):
    """
    Process configuration, read once at startup.

    An empty ALLOWED_ORIGIN switches the origin gate to permissive mode,
    which accepts every origin. Use it for local testing only; never
    deploy it to production.
    """

    # Shopify Admin API
    SHOP: str = Field(default="", description="Bare shop domain, e.g. example.myshopify.com")
    ADMIN_TOKEN: str = Field(default="", repr=False)
    ADMIN_VERSION: str = Field(default=DEFAULT_ADMIN_VERSION)
    UPSTREAM_PROTOCOL: Literal["rest", "graphql"] = Field(default="rest")
    UPSTREAM_TIMEOUT: float = Field(default=10.0, gt=0)

    # CORS
    ALLOWED_ORIGIN: str = Field(default="")

    # Lookup policy
    LOOKUP_MODE: Literal["strict", "lenient"] = Field(default="strict")
    EXPOSE_UPSTREAM_ERRORS: bool = Field(default=False)

    # Server / ops
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    DEBUG_ROUTES: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")
    # level for the helphub.* loggers; empty = LOG_LEVEL
    APP_LOG_LEVEL: str = Field(default="")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @field_validator("SHOP")
    @classmethod
    def _bare_domain(cls, v: str) -> str:
        v = (v or "").strip()
        for scheme in ("https://", "http://"):
            if v.lower().startswith(scheme):
                v = v[len(scheme):]
        return v.rstrip("/")

    @field_validator("ADMIN_VERSION")
    @classmethod
    def _version_default(cls, v: str) -> str:
        return (v or "").strip() or DEFAULT_ADMIN_VERSION

    @property
    def allowed_origins(self) -> List[str]:
        return parse_origin_list(self.ALLOWED_ORIGIN)

    @property
    def is_configured(self) -> bool:
        return bool(self.SHOP and self.ADMIN_TOKEN)

    @property
    def admin_base_url(self) -> str:
        return f"https://{self.SHOP}/admin/api/{self.ADMIN_VERSION}"


def parse_origin_list(raw: str | None) -> List[str]:
    """Split a comma separated origin list; blanks dropped, trailing '/' stripped."""
    out: List[str] = []
    for part in (raw or "").split(","):
        origin = part.strip().rstrip("/")
        if origin and origin not in out:
            out.append(origin)
    return out


@lru_cache
def get_settings() -> AppSettings:
    """Process-entry settings; components get them passed in explicitly."""
    return AppSettings()
