import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eventplanner.core.errors import NotFoundError, ValidationError
from eventplanner.core.upsert import upsert
from eventplanner.models.events import Event, Invitation
from eventplanner.models.users import User
from eventplanner.schemas.invitations import (
    InvitationCreate,
    InvitationRespond,
    InvitationStatus,
)
from eventplanner.services import access_service

logger = logging.getLogger(__name__)

_DELETE_DENIED = "Invitation not found or you are not authorized to delete it"


def _find(db: Session, event_id: int, invitee_id: int) -> Invitation | None:
    return db.execute(
        select(Invitation).where(
            Invitation.event_id == event_id,
            Invitation.invitee_id == invitee_id,
        )
    ).scalar_one_or_none()


def invite_user(
    db: Session, event_id: int, inviter: User, payload: InvitationCreate
) -> Invitation:
    event = access_service.require_organizer(
        db, event_id, inviter.id, "Only the event organizer can invite users"
    )
    invitee = db.get(User, payload.invitee_id)
    if invitee is None:
        raise NotFoundError("Invitee not found")
    if invitee.id == inviter.id:
        raise ValidationError("You cannot invite yourself to an event")

    # Re-inviting overwrites the role and asks for a fresh response.
    upsert(
        db,
        Invitation,
        index_elements=("event_id", "invitee_id"),
        values={
            "event_id": event.id,
            "inviter_id": inviter.id,
            "invitee_id": invitee.id,
            "role": payload.role,
            "status": InvitationStatus.pending,
        },
        update_values={
            "role": payload.role,
            "status": InvitationStatus.pending,
            "updated_at": func.now(),
        },
    )
    db.commit()

    invitation = _find(db, event.id, invitee.id)
    if invitation is None:
        raise NotFoundError("Invitation not found")
    db.refresh(invitation)
    logger.info(
        "User %s invited user %s to event %s as %s",
        inviter.id,
        invitee.id,
        event.id,
        payload.role,
    )
    return invitation


def list_event_invitations(db: Session, event_id: int, user_id: int) -> list[Invitation]:
    event = access_service.require_organizer(
        db, event_id, user_id, "Only the event organizer can view invitations"
    )
    rows = db.execute(
        select(Invitation)
        .where(Invitation.event_id == event.id)
        .order_by(Invitation.created_at.desc(), Invitation.id.desc())
    ).scalars()
    return list(rows)


def list_my_invitations(db: Session, user_id: int) -> list[Invitation]:
    rows = db.execute(
        select(Invitation)
        .join(Event, Event.id == Invitation.event_id)
        .where(Invitation.invitee_id == user_id)
        .order_by(Invitation.created_at.desc(), Invitation.id.desc())
    ).scalars()
    return list(rows)


def respond(
    db: Session, event_id: int, user_id: int, payload: InvitationRespond
) -> Invitation:
    if not payload.is_response():
        raise ValidationError('Status must be either "accepted" or "declined"')

    invitation = _find(db, event_id, user_id)
    if invitation is None:
        raise NotFoundError("Invitation not found")

    invitation.status = payload.status
    invitation.updated_at = func.now()
    db.commit()
    db.refresh(invitation)
    logger.info(
        "User %s %s invitation to event %s", user_id, payload.status, event_id
    )
    return invitation


def delete_invitation(db: Session, event_id: int, invitee_id: int, user_id: int) -> None:
    event = db.get(Event, event_id)
    if event is None or event.organizer_id != user_id:
        raise NotFoundError(_DELETE_DENIED)

    invitation = _find(db, event_id, invitee_id)
    if invitation is None:
        raise NotFoundError(_DELETE_DENIED)

    db.delete(invitation)
    db.commit()
    logger.info(
        "User %s removed invitation of user %s from event %s",
        user_id,
        invitee_id,
        event_id,
    )
