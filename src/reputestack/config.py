"""reputestack.config — runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from limits import parse as parse_limit

from .core import DEFAULT_CHAIN
from .tiers import TierScheme, get_scheme

_FALSY = {"0", "false", "no", "off", ""}


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in _FALSY


def _env_list(value: Optional[str]) -> list[str]:
    if not value:
        return ["*"]
    return [v.strip() for v in value.split(",") if v.strip()] or ["*"]


@dataclass
class Settings:
    tier_scheme: str = "primary"
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    rate_limit_enabled: bool = True
    write_rate_limit: str = "60/minute"
    default_chain: str = DEFAULT_CHAIN
    production: bool = False
    max_body_bytes: int = 1_048_576

    def __post_init__(self):
        # fail at startup, not on the first score request
        get_scheme(self.tier_scheme)
        parse_limit(self.write_rate_limit)

    @property
    def scheme(self) -> TierScheme:
        return get_scheme(self.tier_scheme)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            tier_scheme=env.get("REPUTESTACK_TIER_SCHEME", "primary"),
            log_level=env.get("LOG_LEVEL", "INFO"),
            allowed_origins=_env_list(env.get("ALLOWED_ORIGINS")),
            rate_limit_enabled=_env_bool(env.get("RATELIMIT_ENABLED"), True),
            write_rate_limit=env.get("REPUTESTACK_RATE_LIMIT", "60/minute"),
            default_chain=env.get("REPUTESTACK_DEFAULT_CHAIN", DEFAULT_CHAIN),
            production=_env_bool(env.get("REPUTESTACK_PRODUCTION"), False),
        )
