from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventplanner.api.deps import get_current_user
from eventplanner.core.database import get_db
from eventplanner.models.users import User
from eventplanner.schemas.events import MessageOut
from eventplanner.schemas.invitations import (
    InvitationCreate,
    InvitationEnvelope,
    InvitationListOut,
    InvitationRespond,
    MyInvitationListOut,
)
from eventplanner.services import invitation_service

router = APIRouter(tags=["invitations"])


@router.post(
    "/events/{event_id}/invitations",
    response_model=InvitationEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def invite_user(
    event_id: int,
    payload: InvitationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    invitation = invitation_service.invite_user(db, event_id, user, payload)
    return {"message": "User invited successfully", "invitation": invitation}


@router.get("/events/{event_id}/invitations", response_model=InvitationListOut)
def list_event_invitations(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    invitations = invitation_service.list_event_invitations(db, event_id, user.id)
    return {
        "message": "Invitations retrieved successfully",
        "invitations": invitations,
        "count": len(invitations),
    }


@router.delete(
    "/events/{event_id}/invitations/{invitee_id}",
    response_model=MessageOut,
)
def delete_invitation(
    event_id: int,
    invitee_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    invitation_service.delete_invitation(db, event_id, invitee_id, user.id)
    return {"message": "Invitation deleted successfully"}


@router.get("/invitations", response_model=MyInvitationListOut)
def list_my_invitations(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    invitations = invitation_service.list_my_invitations(db, user.id)
    return {
        "message": "Invitations retrieved successfully",
        "invitations": invitations,
        "count": len(invitations),
    }


@router.put("/invitations/{event_id}", response_model=InvitationEnvelope)
def respond_to_invitation(
    event_id: int,
    payload: InvitationRespond,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    invitation = invitation_service.respond(db, event_id, user.id, payload)
    return {
        "message": f"Invitation {invitation.status} successfully",
        "invitation": invitation,
    }
