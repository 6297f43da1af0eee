"""
Password hashing helpers.

Passwords are stored as argon2 hashes produced through passlib.
"""

import hashlib
import secrets
import string

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

RANDOM_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*()_+"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a stored hash; malformed hashes never match."""
    try:
        return pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        return False


def generate_random_password(length: int = 16) -> str:
    """Throwaway password for accounts that only sign in through Google."""
    return "".join(secrets.choice(RANDOM_PASSWORD_ALPHABET) for _ in range(length))


def password_fingerprint(password_hash: str) -> str:
    """Short digest of a stored hash, used to bind reset tokens to the current password."""
    return hashlib.sha256(password_hash.encode("utf-8")).hexdigest()[:16]
