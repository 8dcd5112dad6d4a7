"""Explicit token configuration handed to the codec, issuer and rotator."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_timedelta(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=int(value))


@dataclass(frozen=True)
class TokenSettings:
    access_secret: str
    refresh_secret: str
    access_lifetime: timedelta = timedelta(minutes=15)
    refresh_lifetime: timedelta = timedelta(days=7)
    algorithm: str = "HS256"
    issuer: str | None = None
    clock: Clock = field(default=utcnow, compare=False, repr=False)

    def __post_init__(self):
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Both access and refresh signing secrets are required")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets")
        if self.access_lifetime <= timedelta(0) or self.refresh_lifetime <= timedelta(0):
            raise ValueError("Token lifetimes must be positive")

    @classmethod
    def from_config(cls, config: Mapping[str, Any], clock: Clock | None = None) -> "TokenSettings":
        """Build settings from a Flask config mapping."""
        return cls(
            access_secret=config["ACCESS_TOKEN_SECRET"],
            refresh_secret=config["REFRESH_TOKEN_SECRET"],
            access_lifetime=_as_timedelta(config["ACCESS_TOKEN_EXPIRES"]),
            refresh_lifetime=_as_timedelta(config["REFRESH_TOKEN_EXPIRES"]),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER"),
            clock=clock or utcnow,
        )
