import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eventplanner.core.errors import AuthorizationError
from eventplanner.core.upsert import upsert
from eventplanner.models.events import Attendance, Event, Invitation
from eventplanner.models.users import User
from eventplanner.schemas.attendance import AttendanceStats, AttendanceStatus
from eventplanner.services import access_service

logger = logging.getLogger(__name__)


def _find(db: Session, event_id: int, user_id: int) -> Attendance | None:
    return db.execute(
        select(Attendance).where(
            Attendance.event_id == event_id,
            Attendance.user_id == user_id,
        )
    ).scalar_one_or_none()


def set_attendance(
    db: Session, event_id: int, user: User, status: AttendanceStatus
) -> Attendance:
    event = access_service.get_event_or_404(db, event_id)
    if event.organizer_id != user.id and not access_service.is_invited(
        db, event.id, user.id
    ):
        raise AuthorizationError("You are not invited to this event")

    upsert(
        db,
        Attendance,
        index_elements=("event_id", "user_id"),
        values={"event_id": event.id, "user_id": user.id, "status": status},
        update_values={"status": status, "updated_at": func.now()},
    )
    db.commit()

    attendance = db.execute(
        select(Attendance).where(
            Attendance.event_id == event.id,
            Attendance.user_id == user.id,
        )
    ).scalar_one()
    # The upsert bypasses the identity map, so reload any stale copy.
    db.refresh(attendance)
    logger.info("User %s set attendance for event %s to %s", user.id, event.id, status)
    return attendance


def get_attendance_stats(db: Session, event: Event) -> AttendanceStats:
    """Count attendance rows by status; ``pending`` is roster members without a row."""
    counts = db.execute(
        select(Attendance.status, func.count())
        .where(Attendance.event_id == event.id)
        .group_by(Attendance.status)
    ).all()
    stats = AttendanceStats()
    for status, count in counts:
        setattr(stats, AttendanceStatus(status).value, count)
        stats.total += count

    roster = {event.organizer_id}
    roster.update(
        db.execute(
            select(Invitation.invitee_id).where(Invitation.event_id == event.id)
        ).scalars()
    )
    responded = set(
        db.execute(
            select(Attendance.user_id).where(Attendance.event_id == event.id)
        ).scalars()
    )
    stats.pending = len(roster - responded)
    return stats


def list_event_attendance(
    db: Session, event_id: int, user_id: int
) -> tuple[list[Attendance], AttendanceStats]:
    event = access_service.require_organizer(
        db, event_id, user_id, "Only the event organizer can view attendance"
    )
    rows = db.execute(
        select(Attendance)
        .where(Attendance.event_id == event.id)
        .order_by(Attendance.updated_at.desc(), Attendance.id.desc())
    ).scalars()
    return list(rows), get_attendance_stats(db, event)


def get_my_attendance(db: Session, event_id: int, user_id: int) -> Attendance | None:
    access_service.get_event_or_404(db, event_id)
    return _find(db, event_id, user_id)


def list_my_attendance(
    db: Session, user_id: int, status: AttendanceStatus | None = None
) -> list[Attendance]:
    stmt = (
        select(Attendance)
        .join(Event, Event.id == Attendance.event_id)
        .where(Attendance.user_id == user_id)
    )
    if status is not None:
        stmt = stmt.where(Attendance.status == status)
    stmt = stmt.order_by(Event.event_date.desc(), Event.event_time.desc())
    return list(db.execute(stmt).scalars())
