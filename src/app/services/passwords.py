import hashlib

import bcrypt

BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72

# Compared against when no user matches, so lookups cost the same either way
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(BCRYPT_ROUNDS))


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def burn_password_check(password: str) -> None:
    bcrypt.checkpw(_password_bytes(password), _DUMMY_HASH)


def hash_token(token: str) -> str:
    """SHA-256 hex digest used to store opaque tokens"""
    return hashlib.sha256(token.encode()).hexdigest()


def token_preview(token: str) -> str:
    """Short prefix safe to write to logs"""
    return token[:8] + "..."
