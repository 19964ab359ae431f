"""
Password hashing for the mock login flow.

Hashes use Argon2id. The hasher parameters are tuned for an interactive
dashboard login rather than long-lived secrets.
"""
from __future__ import annotations

import os

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type

_hasher = PasswordHasher(time_cost=2, memory_cost=19456, parallelism=1, hash_len=32, type=Type.ID)

DEFAULT_MIN_PASSWORD_LENGTH = 6


def min_password_length() -> int:
    try:
        return max(1, int(os.getenv("MIN_PASSWORD_LENGTH", DEFAULT_MIN_PASSWORD_LENGTH)))
    except ValueError:
        return DEFAULT_MIN_PASSWORD_LENGTH


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of ``password`` against a stored Argon2 hash."""
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False
