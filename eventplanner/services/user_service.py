import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eventplanner.core.errors import AuthenticationError, ConflictError, ValidationError
from eventplanner.core.security import hash_password, verify_password
from eventplanner.models.users import User
from eventplanner.schemas.users import LoginIn, UserCreate

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
DEFAULT_SEARCH_LIMIT = 10


def get_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def register_user(db: Session, payload: UserCreate) -> User:
    email = payload.email.strip()
    if get_by_email(db, email) is not None:
        raise ConflictError("User with this email already exists")

    user = User(email=email, password_hash=hash_password(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, user.email)
    return user


def authenticate(db: Session, payload: LoginIn) -> User:
    user = get_by_email(db, payload.email.strip())
    if user is None or not verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    return user


def search_users(
    db: Session, term: str | None, limit: int = DEFAULT_SEARCH_LIMIT
) -> list[User]:
    term = (term or "").strip()
    if len(term) < MIN_SEARCH_LENGTH:
        raise ValidationError(
            f"Email search term must be at least {MIN_SEARCH_LENGTH} characters long"
        )

    stmt = (
        select(User)
        .where(func.lower(User.email).contains(term.lower(), autoescape=True))
        .order_by(User.email)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())
