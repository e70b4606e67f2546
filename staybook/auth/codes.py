"""Access-code generation and the two-stage hashing scheme.

- ``lookup_hash``: SHA-256 hex digest, deterministic, used only to find the
  row with an indexed point query.
- ``hash_code`` / ``verify_code``: bcrypt with a per-code salt, the actual
  secret check. Uses bcrypt directly, as for passwords.
"""

import hashlib
import secrets

import bcrypt

from staybook.config import settings


def generate_raw_code(num_bytes: int | None = None) -> str:
    """Return a URL-safe random code with at least 256 bits of entropy.

    Args:
        num_bytes: Random bytes to draw. Defaults to
            ``settings.access_code_bytes`` and may not go below 32.

    Returns:
        Base64url string without padding (43 chars for 32 bytes).
    """
    size = max(num_bytes or settings.access_code_bytes, 32)
    return secrets.token_urlsafe(size)


def lookup_hash(raw_code: str) -> str:
    """Return the hex SHA-256 digest used to index the code."""
    return hashlib.sha256(raw_code.encode("utf-8")).hexdigest()


def hash_code(raw_code: str) -> str:
    """Hash a raw code using bcrypt.

    Args:
        raw_code: The plaintext code.

    Returns:
        The bcrypt hash string.
    """
    salt = bcrypt.gensalt(rounds=settings.access_code_bcrypt_rounds)
    hashed = bcrypt.hashpw(raw_code.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_code(raw_code: str, hashed_code: str) -> bool:
    """Verify a raw code against its bcrypt hash.

    Returns:
        True if the code matches the hash, False otherwise (including a
        malformed stored hash).
    """
    try:
        return bcrypt.checkpw(raw_code.encode("utf-8"), hashed_code.encode("utf-8"))
    except ValueError:
        return False
