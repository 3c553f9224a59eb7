import logging

from sqlalchemy import ColumnElement, case, exists, func, null, or_, select
from sqlalchemy.orm import Session

from eventplanner.core.errors import NotFoundError, ValidationError
from eventplanner.models.events import Attendance, Event, Invitation
from eventplanner.models.users import User
from eventplanner.schemas.attendance import AttendanceOut
from eventplanner.schemas.events import (
    EventCreate,
    EventDetailOut,
    EventOut,
    EventRole,
    EventSearchFilters,
    EventUpdate,
    InvitedEventOut,
)
from eventplanner.schemas.invitations import InvitationOut
from eventplanner.services import access_service, attendance_service

logger = logging.getLogger(__name__)

_NEWEST_FIRST = (Event.event_date.desc(), Event.event_time.desc())


def _event_out(event: Event, role: EventRole | str | None) -> EventOut:
    return EventOut.model_validate(event).model_copy(
        update={"user_role": EventRole(role) if role else None}
    )


def create_event(db: Session, organizer: User, payload: EventCreate) -> EventOut:
    event = Event(
        title=payload.title,
        description=payload.description,
        event_date=payload.event_date,
        event_time=payload.event_time,
        location=payload.location,
        organizer_id=organizer.id,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("User %s created event %s", organizer.id, event.id)
    return _event_out(event, EventRole.organizer)


def list_organized(db: Session, user_id: int) -> list[EventOut]:
    events = db.execute(
        select(Event).where(Event.organizer_id == user_id).order_by(*_NEWEST_FIRST)
    ).scalars()
    return [_event_out(event, EventRole.organizer) for event in events]


def list_invited(db: Session, user_id: int) -> list[InvitedEventOut]:
    rows = db.execute(
        select(Event, Invitation.role, Invitation.status)
        .join(Invitation, Invitation.event_id == Event.id)
        .where(Invitation.invitee_id == user_id)
        .order_by(*_NEWEST_FIRST)
    ).all()
    return [
        InvitedEventOut(
            **_event_out(event, EventRole.attendee).model_dump(),
            invitation_role=role,
            invitation_status=invitation_status,
        )
        for event, role, invitation_status in rows
    ]


def get_event_detail(db: Session, event_id: int, user_id: int | None) -> EventDetailOut:
    event = access_service.get_event_or_404(db, event_id)
    role = access_service.resolve_event_role(db, event, user_id)
    detail = EventDetailOut(**_event_out(event, role).model_dump())

    # Roster aggregates are only exposed to the organizer.
    if role is EventRole.organizer:
        invitations = db.execute(
            select(Invitation)
            .where(Invitation.event_id == event.id)
            .order_by(Invitation.created_at.desc(), Invitation.id.desc())
        ).scalars()
        attendance = db.execute(
            select(Attendance)
            .where(Attendance.event_id == event.id)
            .order_by(Attendance.updated_at.desc(), Attendance.id.desc())
        ).scalars()
        detail.invitations = [InvitationOut.model_validate(i) for i in invitations]
        detail.attendance = [AttendanceOut.model_validate(a) for a in attendance]
        detail.attendanceStats = attendance_service.get_attendance_stats(db, event)
    return detail


def update_event(
    db: Session, event_id: int, user_id: int, payload: EventUpdate
) -> EventOut:
    event = access_service.require_organizer(
        db, event_id, user_id, "You are not authorized to update this event"
    )
    changes = payload.changes()
    for field, value in changes.items():
        setattr(event, field, value)
    event.updated_at = func.now()
    db.commit()
    db.refresh(event)
    logger.info("User %s updated event %s fields=%s", user_id, event_id, sorted(changes))
    return _event_out(event, EventRole.organizer)


def delete_event(db: Session, event_id: int, user_id: int) -> None:
    event = db.get(Event, event_id)
    if event is None or event.organizer_id != user_id:
        raise NotFoundError("Event not found or you are not authorized to delete it")

    db.delete(event)
    db.commit()
    logger.info("User %s deleted event %s", user_id, event_id)


def _invited_clause(user_id: int) -> ColumnElement[bool]:
    return exists().where(
        Invitation.event_id == Event.id,
        Invitation.invitee_id == user_id,
    )


def search_events(
    db: Session, filters: EventSearchFilters, user_id: int | None
) -> list[EventOut]:
    if filters.start_date and filters.end_date and filters.end_date < filters.start_date:
        raise ValidationError("End date cannot be before start date")

    clauses: list[ColumnElement[bool]] = []
    if filters.keyword:
        pattern = f"%{filters.keyword.strip()}%"
        clauses.append(
            or_(Event.title.ilike(pattern), Event.description.ilike(pattern))
        )
    if filters.start_date:
        clauses.append(Event.event_date >= filters.start_date)
    if filters.end_date:
        clauses.append(Event.event_date <= filters.end_date)

    if user_id is None:
        role_column = null()
    else:
        is_organizer = Event.organizer_id == user_id
        is_invited = _invited_clause(user_id)
        role_column = case(
            (is_organizer, EventRole.organizer.value),
            (is_invited, EventRole.attendee.value),
            else_=null(),
        )
        if filters.role is EventRole.organizer:
            clauses.append(is_organizer)
        elif filters.role is EventRole.attendee:
            clauses.append(is_invited)

    stmt = (
        select(Event, role_column.label("user_role"))
        .where(*clauses)
        .distinct()
        .order_by(*_NEWEST_FIRST)
    )
    return [_event_out(event, role) for event, role in db.execute(stmt).all()]
