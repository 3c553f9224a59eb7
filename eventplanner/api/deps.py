import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from eventplanner.core.database import get_db
from eventplanner.core.errors import AuthenticationError
from eventplanner.core.security import decode_token
from eventplanner.models.users import User

ACCESS_COOKIE = "access_token"


def _extract_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    scheme, _, param = auth_header.strip().partition(" ")
    if scheme.lower() != "bearer" or not param:
        raise AuthenticationError("Invalid authorization header")
    return param.strip()


def _authenticate_token(raw_token: str, db: Session) -> User:
    try:
        payload = decode_token(raw_token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    sub = payload.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")

    user = db.get(User, user_id)
    if not user:
        raise AuthenticationError("User not found")
    return user


def _resolve_user(request: Request, db: Session) -> User | None:
    """Try the bearer header, then the session cookie; None if neither is present."""
    last_error: AuthenticationError | None = None

    header_token = _extract_bearer_token(request)
    if header_token:
        try:
            return _authenticate_token(header_token, db)
        except AuthenticationError as exc:
            last_error = exc

    cookie_token = request.cookies.get(ACCESS_COOKIE)
    if cookie_token:
        try:
            return _authenticate_token(cookie_token, db)
        except AuthenticationError as exc:
            last_error = exc

    if last_error:
        raise last_error
    return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    user = _resolve_user(request, db)
    if user is None:
        raise AuthenticationError()
    return user


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    return _resolve_user(request, db)
