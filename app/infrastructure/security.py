"""Signed token helpers for API access and unsubscribe links."""

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import get_settings

ALGORITHM = "HS256"
TOKEN_ISSUER = "real-estate-portfolio"
TOKEN_AUDIENCE = "user"
PURPOSE_UNSUBSCRIBE = "unsubscribe"


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


# ---- Access tokens ----


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = _now() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


# ---- Unsubscribe tokens ----


def generate_unsubscribe_token(user_id: int, *, expires_delta: timedelta | None = None) -> str:
    """Return a signed token that lets ``user_id`` opt out of emails without logging in."""

    settings = get_settings()
    issued_at = _now()
    expire = issued_at + (
        expires_delta or timedelta(days=settings.unsubscribe_token_expire_days)
    )
    claims = {
        "sub": str(user_id),
        "purpose": PURPOSE_UNSUBSCRIBE,
        "iss": TOKEN_ISSUER,
        "aud": TOKEN_AUDIENCE,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def verify_unsubscribe_token(token: str) -> int:
    """Return the user id carried by an unsubscribe ``token``.

    Raises ``ValueError`` when the token is expired, tampered with or was issued
    for another purpose.
    """

    try:
        payload = jwt.decode(
            token,
            get_settings().secret_key,
            algorithms=[ALGORITHM],
            audience=TOKEN_AUDIENCE,
            issuer=TOKEN_ISSUER,
        )
    except ExpiredSignatureError as exc:
        raise ValueError("Token has expired") from exc
    except JWTError as exc:
        raise ValueError("Invalid unsubscribe token") from exc

    purpose = payload.get("purpose")
    if purpose != PURPOSE_UNSUBSCRIBE:
        raise ValueError(
            f"Invalid token purpose. Expected {PURPOSE_UNSUBSCRIBE}, got {purpose}"
        )
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError("Invalid unsubscribe token") from exc
