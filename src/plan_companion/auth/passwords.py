# src/plan_companion/auth/passwords.py

"""Salted PBKDF2 password hashing with constant-time verification."""

from __future__ import annotations

import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 240_000


def _derive(password: str, salt: str, iterations: int) -> str:
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return dk.hex()


def hash_password(password: str, *, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Hash a password for storage: "<algo>$<iterations>$<salt>$<hex digest>"."""
    salt = secrets.token_hex(16)
    return f"{ALGORITHM}${iterations}${salt}${_derive(password, salt, iterations)}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its stored hash. Malformed hashes never match."""
    try:
        algo, iters_s, salt, expected = password_hash.split("$")
        iterations = int(iters_s)
    except (AttributeError, ValueError):
        return False
    if algo != ALGORITHM or iterations <= 0:
        return False
    return hmac.compare_digest(_derive(password, salt, iterations), expected)


def generate_token() -> str:
    """Generate an opaque session token."""
    return secrets.token_urlsafe(32)
