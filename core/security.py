"""Password hashing and opaque token helpers.

Credentials are stored as ``<hex(scrypt key)>.<hex salt>``. The hex salt
string itself is what is fed to scrypt, which keeps hashes created by the
previous deployment verifiable.
"""

import hashlib
import hmac
import secrets

from core.logger import get_logger

logger = get_logger("core.security")

SEPARATOR = "."

# scrypt cost parameters (N=2^14, r=8, p=1, 64 byte key).
_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1
_SCRYPT_MAXMEM = 64 * 1024 * 1024
_KEY_LEN = 64
_SALT_BYTES = 16
_TOKEN_BYTES = 32


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        maxmem=_SCRYPT_MAXMEM,
        dklen=_KEY_LEN,
    )


def hash_password(password: str) -> str:
    """Derive a salted scrypt credential for ``password``.

    A fresh random salt is drawn on every call, so hashing the same password
    twice yields two different credentials that both verify.
    """
    salt = secrets.token_hex(_SALT_BYTES)
    key = _derive(password, salt)
    return f"{key.hex()}{SEPARATOR}{salt}"


def verify_password(password: str, credential: str) -> bool:
    """Check ``password`` against a stored credential.

    Anything that is not a well formed ``hash.salt`` pair is rejected; there
    is no plaintext comparison path. Never raises.
    """
    if not password or not credential:
        return False
    parts = credential.split(SEPARATOR)
    if len(parts) != 2:
        return False
    hashed, salt = parts
    if not hashed or not salt:
        return False
    try:
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    if len(expected) != _KEY_LEN:
        return False
    try:
        actual = _derive(password, salt)
    except (ValueError, MemoryError):
        logger.warning("scrypt derivation failed while verifying a credential")
        return False
    return hmac.compare_digest(actual, expected)


def is_hashed(credential: str) -> bool:
    """Return True when ``credential`` has the ``hash.salt`` shape."""
    if not credential:
        return False
    parts = credential.split(SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return False
    try:
        return len(bytes.fromhex(parts[0])) == _KEY_LEN
    except ValueError:
        return False


def generate_token() -> str:
    """Return a 256-bit random token, hex encoded."""
    return secrets.token_hex(_TOKEN_BYTES)


def unusable_password() -> str:
    """Return a credential nobody knows the password for.

    Used as the placeholder for invited users so the row can never be logged
    into before activation.
    """
    return hash_password(secrets.token_hex(_SALT_BYTES))
