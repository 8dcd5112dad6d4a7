"""HTTP cookie helpers for refresh token transport."""

from __future__ import annotations

from flask import current_app


def _cookie_options() -> dict:
    cfg = current_app.config
    return {
        "path": cfg["REFRESH_COOKIE_PATH"],
        "secure": cfg["REFRESH_COOKIE_SECURE"],
        "samesite": cfg["REFRESH_COOKIE_SAMESITE"],
    }


def read_refresh_cookie(request) -> str | None:
    return request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"]) or None


def set_refresh_cookie(response, refresh_token: str) -> None:
    response.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        refresh_token,
        httponly=True,
        max_age=int(current_app.config["REFRESH_TOKEN_EXPIRES"]),
        **_cookie_options(),
    )


def clear_refresh_cookie(response) -> None:
    response.delete_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        httponly=True,
        **_cookie_options(),
    )
