import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class InvitationRole(StrEnum):
    organizer = "organizer"
    attendee = "attendee"


class InvitationStatus(StrEnum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class InvitationCreate(BaseModel):
    invitee_id: int = Field(ge=1, description="Id of the user being invited")
    role: InvitationRole = InvitationRole.attendee


class InvitationRespond(BaseModel):
    status: InvitationStatus

    def is_response(self) -> bool:
        return self.status in (InvitationStatus.accepted, InvitationStatus.declined)


class InvitationOut(BaseModel):
    id: int
    event_id: int
    inviter_id: int
    invitee_id: int
    invitee_email: str | None = None
    role: InvitationRole
    status: InvitationStatus
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class MyInvitationOut(InvitationOut):
    event_title: str
    event_date: datetime.date
    event_time: datetime.time
    location: str
    inviter_email: str | None = None


class InvitationEnvelope(BaseModel):
    message: str
    invitation: InvitationOut


class InvitationListOut(BaseModel):
    message: str
    invitations: list[InvitationOut]
    count: int


class MyInvitationListOut(BaseModel):
    message: str
    invitations: list[MyInvitationOut]
    count: int
