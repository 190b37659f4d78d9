from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, Field

ENV_PREFIX = "CATALOG_ADMIN_"


class Settings(BaseModel):
    base_url: str = Field(
        default="https://localhost:7077/api",
        description="Root of the REST backend; resource paths are appended to it.",
    )
    timeout: float = Field(default=10.0, gt=0)
    verify_tls: bool = Field(
        default=True,
        description="Set to false for a local backend with a self-signed dev certificate.",
    )
    log_level: str = Field(default="INFO")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``CATALOG_ADMIN_*`` environment variables.

    - Unset or blank variables fall back to defaults.
    - Validation is performed by Pydantic.
    """

    env = os.environ if environ is None else environ
    raw = {}
    for name in Settings.model_fields:
        value = env.get(ENV_PREFIX + name.upper())
        if value is not None and value.strip():
            raw[name] = value.strip()
    return Settings.model_validate(raw)
