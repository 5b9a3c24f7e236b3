"""Security: JWT verification and password hashing."""

from app.infrastructure.security.jwt import token_subject, verify_token
from app.infrastructure.security.password import get_password_hash, verify_password

__all__ = [
    "get_password_hash",
    "token_subject",
    "verify_password",
    "verify_token",
]
