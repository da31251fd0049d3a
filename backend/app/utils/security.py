import hmac
from functools import lru_cache

import bcrypt

from ..config import BCRYPT_ROUNDS


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash password using bcrypt directly (bypasses passlib+version issues).

    bcrypt truncates at 72 *bytes* and this build raises if you exceed it,
    so enforce the limit explicitly.
    """
    if not password:
        raise ValueError("Password is required")

    pw_bytes = password.encode("utf-8")
    if len(pw_bytes) > 72:
        raise ValueError("Password must be 72 bytes or less")

    hashed = bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        if not password or not hashed:
            return False
        pw_bytes = password.encode("utf-8")
        if len(pw_bytes) > 72:
            return False
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("dummy-password-for-timing")


def burn_password_check(password: str) -> None:
    """Spend the same bcrypt work as a real check when there is no user to check against."""
    verify_password(password or "x", _dummy_hash())


def codes_match(expected: str, supplied: str) -> bool:
    if expected is None or supplied is None:
        return False
    return hmac.compare_digest(str(expected).encode("utf-8"), str(supplied).encode("utf-8"))
