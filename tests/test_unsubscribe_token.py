"""Tests for signed unsubscribe tokens."""

from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from app.config import get_settings
from app.infrastructure.security import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    generate_unsubscribe_token,
    verify_unsubscribe_token,
)


def test_round_trip_returns_user_id() -> None:
    token = generate_unsubscribe_token(42)
    assert verify_unsubscribe_token(token) == 42


def test_token_claims() -> None:
    token = generate_unsubscribe_token(7)
    claims = jwt.get_unverified_claims(token)
    assert claims["sub"] == "7"
    assert claims["purpose"] == "unsubscribe"
    assert claims["iss"] == "real-estate-portfolio"
    assert claims["aud"] == "user"
    assert claims["exp"] - claims["iat"] == 90 * 24 * 3600


def test_expired_token_is_rejected() -> None:
    token = generate_unsubscribe_token(7, expires_delta=timedelta(seconds=-1))
    with pytest.raises(ValueError, match="expired"):
        verify_unsubscribe_token(token)


def test_tampered_token_is_rejected() -> None:
    header, payload, signature = generate_unsubscribe_token(7).split(".")
    forged = "B" if signature[0] == "A" else "A"
    with pytest.raises(ValueError, match="Invalid unsubscribe token"):
        verify_unsubscribe_token(".".join((header, payload, forged + signature[1:])))


def test_token_for_other_purpose_is_rejected() -> None:
    token = jwt.encode(
        {"sub": "7", "purpose": "password_reset", "iss": "real-estate-portfolio", "aud": "user"},
        get_settings().secret_key,
        algorithm=ALGORITHM,
    )
    with pytest.raises(ValueError, match="Invalid token purpose"):
        verify_unsubscribe_token(token)


def test_access_token_cannot_unsubscribe() -> None:
    token = create_access_token({"sub": "7"})
    assert decode_access_token(token)["sub"] == "7"
    with pytest.raises(ValueError):
        verify_unsubscribe_token(token)
