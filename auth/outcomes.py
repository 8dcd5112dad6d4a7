"""
Outcome types shared by the token lifecycle.

Core operations do not raise for expected failures; they return a ``Result``
carrying either a value or an ``AuthError`` kind. The HTTP layer decides how
coarse the observable outcome is.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class AuthError(str, Enum):
    # refresh / rotation path
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    UNKNOWN_ACCOUNT = "unknown_account"
    STALE_TOKEN = "stale_token"
    # codec
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    # guard
    MISSING_TOKEN = "missing_token"
    # accounts
    AUTHENTICATION_FAILED = "authentication_failed"
    ALREADY_REGISTERED = "already_registered"


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[AuthError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AuthError) -> "Result[T]":
        return cls(error=error)
