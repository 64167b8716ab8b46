"""
GrowthMindz Admin - Password Handling
bcrypt hash-and-compare, accepting clear-text rows left by earlier revisions
"""
import hmac
from typing import Optional, Tuple

from flask import current_app


_BCRYPT_PREFIXES = ('$2a$', '$2b$', '$2y$')


def is_bcrypt_hash(value: Optional[str]) -> bool:
    return bool(value) and value.startswith(_BCRYPT_PREFIXES)


def hash_password(password: str) -> str:
    return current_app.bcrypt.generate_password_hash(password).decode('utf-8')


def verify_password(password: str, stored: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Check a password against the stored value.

    Returns (valid, upgraded_hash). upgraded_hash is set when the stored value
    was clear text and should be replaced by a bcrypt hash.
    """
    if not password or not stored:
        return False, None

    if is_bcrypt_hash(stored):
        try:
            return current_app.bcrypt.check_password_hash(stored, password), None
        except ValueError:
            return False, None

    if hmac.compare_digest(stored.encode('utf-8'), password.encode('utf-8')):
        return True, hash_password(password)
    return False, None
