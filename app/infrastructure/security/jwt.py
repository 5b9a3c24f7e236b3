"""JWT verification for bearer tokens issued by the auth service.

Tokens are signed with the shared secret (settings.secret_key). The user is
identified by the sub claim or, for tokens from the legacy login route, by
the numeric id claim.
"""

from typing import Any

from jose import JWTError, jwt

from app.core.config import get_settings


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and of either sub or id.

    Args:
        token: JWT string (e.g. from Authorization header).

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if payload.get("sub") is None and payload.get("id") is None:
        raise ValueError("Token missing required claim: sub or id")
    return payload


def token_subject(payload: dict[str, Any]) -> int | str:
    """Return the user identifier: int user id when numeric, else the raw subject."""
    subject = payload.get("id", payload.get("sub"))
    if isinstance(subject, int):
        return subject
    text = str(subject).strip()
    return int(text) if text.isdigit() else text
