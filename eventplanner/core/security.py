from datetime import UTC, datetime, timedelta

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from eventplanner.core.config import get_settings

ph = PasswordHasher(time_cost=3, memory_cost=64 * 1024, parallelism=2)


def hash_password(plain: str) -> str:
    return ph.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return ph.verify(hashed, plain)
    except (VerificationError, InvalidHashError):
        return False


def create_token(sub: str, email: str, ttl: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(UTC)
    payload = {
        "sub": sub,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algo)


def create_access(sub: str, email: str) -> str:
    return create_token(sub, email, timedelta(minutes=get_settings().access_min))


def decode_token(raw_token: str) -> dict:
    """Verify signature and expiry; raises ``jwt.InvalidTokenError`` subclasses."""
    settings = get_settings()
    return jwt.decode(raw_token, settings.jwt_secret, algorithms=[settings.jwt_algo])
