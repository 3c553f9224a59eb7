import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import datetime
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from eventplanner.core.database import Base, enable_sqlite_foreign_keys, get_db
from eventplanner.core.security import create_access, hash_password
from eventplanner.main import app
from eventplanner.models.events import Event, Invitation
from eventplanner.models.users import User
from eventplanner.schemas.invitations import InvitationRole, InvitationStatus

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session]:
    connection = engine.connect()
    trans = connection.begin()

    TestingSessionLocal = sessionmaker(
        bind=connection, autoflush=False, expire_on_commit=False, future=True
    )
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture
def client(db_session) -> Generator[TestClient]:
    # Override FastAPI's get_db to use our testing session
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def create_test_user(db: Session, email: str = "user@example.com") -> User:
    user = User(email=email, password_hash=hash_password(DEFAULT_PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access(str(user.id), user.email)}"}


def future_date(days: int = 7) -> datetime.date:
    return datetime.date.today() + datetime.timedelta(days=days)


def create_test_event(
    db: Session,
    organizer: User,
    title: str = "Team offsite",
    days_ahead: int = 7,
    event_time: datetime.time = datetime.time(18, 30),
    description: str | None = None,
) -> Event:
    event = Event(
        title=title,
        event_date=future_date(days_ahead),
        event_time=event_time,
        location="Main hall",
        organizer_id=organizer.id,
        description=description,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def invite(
    db: Session,
    event: Event,
    invitee: User,
    status: InvitationStatus = InvitationStatus.pending,
) -> Invitation:
    invitation = Invitation(
        event_id=event.id,
        inviter_id=event.organizer_id,
        invitee_id=invitee.id,
        role=InvitationRole.attendee,
        status=status,
    )
    db.add(invitation)
    db.commit()
    db.refresh(invitation)
    return invitation


@pytest.fixture
def test_user(db_session) -> User:
    return create_test_user(db_session, "organizer@example.com")


@pytest.fixture
def other_user(db_session) -> User:
    return create_test_user(db_session, "guest@example.com")


@pytest.fixture
def auth_client(client, test_user) -> tuple[TestClient, User]:
    token = create_access(str(test_user.id), test_user.email)
    client.cookies.set("access_token", token, path="/")
    return client, test_user


@pytest.fixture
def event(db_session, test_user) -> Event:
    return create_test_event(db_session, test_user)


@pytest.fixture
def make_user(db_session):
    def _make(email: str) -> User:
        return create_test_user(db_session, email)

    return _make


@pytest.fixture
def make_event(db_session):
    def _make(organizer: User, **kwargs) -> Event:
        return create_test_event(db_session, organizer, **kwargs)

    return _make


@pytest.fixture
def make_invitation(db_session):
    def _make(
        event: Event,
        invitee: User,
        status: InvitationStatus = InvitationStatus.pending,
    ) -> Invitation:
        return invite(db_session, event, invitee, status)

    return _make


@pytest.fixture
def headers_for():
    return auth_headers
