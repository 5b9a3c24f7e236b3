"""Password hashing for seeded accounts (plain bcrypt, cost 10).

Hashes must stay verifiable by the login service that shares the users
table, which checks raw bcrypt without a pre-hash. Bcrypt only reads the
first 72 bytes, so longer inputs are truncated explicitly.
"""

import bcrypt

BCRYPT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password."""
    try:
        return bool(bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Return a $2b$ bcrypt hash of password."""
    hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")
