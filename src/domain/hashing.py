"""
Credential hashing.

LegacyHasher reproduces the stored-credential format of existing accounts:
MD5 of the password, then SHA-256 of that lowercase hex digest. It is
unsalted and fast, so it is kept for compatibility only. BcryptHasher is
the salted, adaptive replacement; select it with ``password_scheme``.
"""

import hashlib
import secrets
from typing import Protocol

import bcrypt

from .exceptions import ConfigurationError

BCRYPT_MAX_BYTES = 72


class Hasher(Protocol):
    """One-way credential transform."""

    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, stored: str) -> bool: ...


class LegacyHasher:
    """Deterministic two-stage MD5 -> SHA-256 hasher."""

    def hash(self, plaintext: str) -> str:
        md5_hex = hashlib.md5(_utf8(plaintext)).hexdigest()
        return hashlib.sha256(md5_hex.encode("utf-8")).hexdigest()

    def verify(self, plaintext: str, stored: str) -> bool:
        return secrets.compare_digest(self.hash(plaintext), stored or "")


class BcryptHasher:
    """
    Salted bcrypt hasher with a configurable work factor.

    bcrypt only reads the first 72 bytes of a password; longer inputs are
    truncated to that length in both hash() and verify().
    """

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(_bcrypt_input(plaintext), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, plaintext: str, stored: str) -> bool:
        if not stored:
            return False
        try:
            return bcrypt.checkpw(_bcrypt_input(plaintext), stored.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash (e.g. a legacy hex digest)
            return False


def _utf8(plaintext: str) -> bytes:
    """UTF-8 bytes of ``plaintext`` with unpaired surrogates replaced by U+FFFD."""
    return plaintext.encode("utf-16", "surrogatepass").decode("utf-16", "replace").encode("utf-8")


def _bcrypt_input(plaintext: str) -> bytes:
    return _utf8(plaintext)[:BCRYPT_MAX_BYTES]


def build_hasher(scheme: str, bcrypt_cost: int = 10) -> Hasher:
    """
    Build the hasher named by configuration.

    Raises:
        ConfigurationError: If the scheme is unknown
    """
    if scheme == "legacy":
        return LegacyHasher()
    if scheme == "bcrypt":
        return BcryptHasher(rounds=bcrypt_cost)
    raise ConfigurationError(f"Unknown password scheme: {scheme}")
