from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from eventplanner.core.errors import AuthorizationError, NotFoundError
from eventplanner.models.events import Event, Invitation
from eventplanner.schemas.events import EventRole


def get_event_or_404(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event


def is_invited(db: Session, event_id: int, user_id: int) -> bool:
    """True when the user holds an invitation to the event, whatever its status."""
    stmt = select(
        exists().where(
            Invitation.event_id == event_id,
            Invitation.invitee_id == user_id,
        )
    )
    return bool(db.execute(stmt).scalar())


def resolve_event_role(
    db: Session, event: Event, user_id: int | None
) -> EventRole | None:
    if user_id is None:
        return None
    if event.organizer_id == user_id:
        return EventRole.organizer
    if is_invited(db, event.id, user_id):
        return EventRole.attendee
    return None


def require_organizer(db: Session, event_id: int, user_id: int, detail: str) -> Event:
    event = get_event_or_404(db, event_id)
    if event.organizer_id != user_id:
        raise AuthorizationError(detail)
    return event
