"""Unit tests for the token codec."""

from datetime import timedelta

import jwt
import pytest

from auth import AuthError, TokenClass, TokenCodec, TokenSettings
from auth.codec import decode, encode

from conftest import ACCESS_SECRET, REFRESH_SECRET


def test_encode_then_decode_returns_account_and_expiry(settings, clock):
    codec = TokenCodec(settings)
    token = codec.encode("acct-1", TokenClass.ACCESS)

    result = codec.decode(token, TokenClass.ACCESS)

    assert result.ok
    claims = result.value
    assert claims.account_id == "acct-1"
    assert claims.token_type == "access"
    assert claims.issued_at == clock.now
    assert claims.expires_at == clock.now + timedelta(minutes=15)


def test_token_expires_exactly_at_its_lifetime(settings, clock):
    codec = TokenCodec(settings)
    token = codec.encode("acct-1", TokenClass.ACCESS)

    clock.advance(minutes=15, seconds=-1)
    assert codec.decode(token, TokenClass.ACCESS).ok

    clock.advance(seconds=1)
    result = codec.decode(token, TokenClass.ACCESS)
    assert result.error is AuthError.EXPIRED


def test_sub_second_issue_time_expires_exactly(settings, clock):
    clock.advance(milliseconds=750)
    codec = TokenCodec(settings)
    token = codec.encode("acct-1", TokenClass.ACCESS)

    clock.advance(minutes=15, milliseconds=-250)
    assert codec.decode(token, TokenClass.ACCESS).ok

    clock.advance(milliseconds=250)
    assert codec.decode(token, TokenClass.ACCESS).error is AuthError.EXPIRED


def test_fractional_lifetime_is_honoured(clock):
    token = encode(
        "acct-1", ACCESS_SECRET, timedelta(seconds=1.5), token_type="access", now=clock.now
    )

    later = clock.now + timedelta(seconds=1)
    assert decode(token, ACCESS_SECRET, token_type="access", now=later).ok

    at_expiry = clock.now + timedelta(seconds=1.5)
    result = decode(token, ACCESS_SECRET, token_type="access", now=at_expiry)
    assert result.error is AuthError.EXPIRED


def test_refresh_token_outlives_access_token(settings, clock):
    codec = TokenCodec(settings)
    access = codec.encode("acct-1", TokenClass.ACCESS)
    refresh = codec.encode("acct-1", TokenClass.REFRESH)

    clock.advance(hours=1)

    assert codec.decode(access, TokenClass.ACCESS).error is AuthError.EXPIRED
    assert codec.decode(refresh, TokenClass.REFRESH).ok


def test_token_classes_are_not_interchangeable(settings):
    codec = TokenCodec(settings)
    access = codec.encode("acct-1", TokenClass.ACCESS)
    refresh = codec.encode("acct-1", TokenClass.REFRESH)

    assert codec.decode(refresh, TokenClass.ACCESS).error is AuthError.INVALID_SIGNATURE
    assert codec.decode(access, TokenClass.REFRESH).error is AuthError.INVALID_SIGNATURE


def test_refresh_secret_never_verifies_access_token(clock):
    token = encode("acct-1", ACCESS_SECRET, timedelta(minutes=5), token_type="access", now=clock.now)

    result = decode(token, REFRESH_SECRET, token_type="access", now=clock.now)

    assert result.error is AuthError.INVALID_SIGNATURE


def test_wrong_type_claim_is_rejected_even_with_matching_secret(clock):
    token = encode("acct-1", ACCESS_SECRET, timedelta(minutes=5), token_type="refresh", now=clock.now)

    result = decode(token, ACCESS_SECRET, token_type="access", now=clock.now)

    assert result.error is AuthError.INVALID_SIGNATURE


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_malformed_tokens_are_rejected(settings, token):
    result = TokenCodec(settings).decode(token, TokenClass.ACCESS)
    assert result.error is AuthError.INVALID_SIGNATURE


def test_tampered_payload_is_rejected(settings, clock):
    codec = TokenCodec(settings)
    token = codec.encode("acct-1", TokenClass.ACCESS)
    forged = jwt.encode(
        {"sub": "acct-2", "iat": 0, "exp": 2**40, "jti": "x", "type": "access"},
        "someone-elses-secret",
        algorithm="HS256",
    )
    header, _, signature = token.split(".")
    spliced = ".".join([header, forged.split(".")[1], signature])

    assert codec.decode(forged, TokenClass.ACCESS).error is AuthError.INVALID_SIGNATURE
    assert codec.decode(spliced, TokenClass.ACCESS).error is AuthError.INVALID_SIGNATURE


def test_missing_claims_are_rejected(clock):
    token = jwt.encode({"sub": "acct-1", "type": "access"}, ACCESS_SECRET, algorithm="HS256")

    result = decode(token, ACCESS_SECRET, token_type="access", now=clock.now)

    assert result.error is AuthError.INVALID_SIGNATURE


def test_tokens_minted_in_the_same_second_differ(settings):
    codec = TokenCodec(settings)
    first = codec.encode("acct-1", TokenClass.REFRESH)
    second = codec.encode("acct-1", TokenClass.REFRESH)
    assert first != second


def test_issuer_claim_is_enforced(clock):
    ours = TokenSettings(ACCESS_SECRET, REFRESH_SECRET, issuer="us", clock=clock)
    theirs = TokenSettings(ACCESS_SECRET, REFRESH_SECRET, issuer="them", clock=clock)
    token = TokenCodec(theirs).encode("acct-1", TokenClass.ACCESS)

    assert TokenCodec(ours).decode(token, TokenClass.ACCESS).error is AuthError.INVALID_SIGNATURE


def test_settings_refuse_shared_secret():
    with pytest.raises(ValueError):
        TokenSettings(access_secret="same", refresh_secret="same")


def test_settings_from_flask_style_config():
    settings = TokenSettings.from_config(
        {
            "ACCESS_TOKEN_SECRET": "a",
            "REFRESH_TOKEN_SECRET": "r",
            "ACCESS_TOKEN_EXPIRES": 60,
            "REFRESH_TOKEN_EXPIRES": timedelta(days=1),
            "JWT_ISSUER": "svc",
        }
    )
    assert settings.access_lifetime == timedelta(seconds=60)
    assert settings.refresh_lifetime == timedelta(days=1)
    assert settings.algorithm == "HS256"
    assert settings.issuer == "svc"
