import datetime
import re
from enum import StrEnum
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from eventplanner.schemas.attendance import AttendanceOut, AttendanceStats
from eventplanner.schemas.invitations import (
    InvitationOut,
    InvitationRole,
    InvitationStatus,
)

_TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)]
Location = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)
]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)]


class EventRole(StrEnum):
    organizer = "organizer"
    attendee = "attendee"


def _parse_event_time(value: object) -> object:
    if isinstance(value, str):
        if not _TIME_PATTERN.fullmatch(value.strip()):
            raise ValueError("Event time must be in HH:MM format (24-hour)")
        hours, minutes = value.strip().split(":")
        return datetime.time(int(hours), int(minutes))
    return value


def _reject_past_date(value: datetime.date | None) -> datetime.date | None:
    if value is not None and value < datetime.date.today():
        raise ValueError("Event date cannot be in the past")
    return value


class EventCreate(BaseModel):
    title: Title
    description: Description | None = None
    event_date: datetime.date
    event_time: datetime.time
    location: Location

    @field_validator("event_time", mode="before")
    @classmethod
    def _validate_time(cls, value: object) -> object:
        return _parse_event_time(value)

    @field_validator("event_date")
    @classmethod
    def _validate_date(cls, value: datetime.date) -> datetime.date:
        return _reject_past_date(value)

    @field_validator("description")
    @classmethod
    def _blank_description(cls, value: str | None) -> str | None:
        return value or None


class EventUpdate(BaseModel):
    title: Title | None = None
    description: Description | None = None
    event_date: datetime.date | None = None
    event_time: datetime.time | None = None
    location: Location | None = None

    @field_validator("event_time", mode="before")
    @classmethod
    def _validate_time(cls, value: object) -> object:
        return _parse_event_time(value)

    @field_validator("event_date")
    @classmethod
    def _validate_date(cls, value: datetime.date | None) -> datetime.date | None:
        return _reject_past_date(value)

    @field_validator("description")
    @classmethod
    def _blank_description(cls, value: str | None) -> str | None:
        return value or None

    @model_validator(mode="after")
    def _reject_null_required(self) -> "EventUpdate":
        for name in ("title", "event_date", "event_time", "location"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class EventOut(BaseModel):
    id: int
    title: str
    description: str | None
    event_date: datetime.date
    event_time: datetime.time
    location: str
    organizer_id: int
    organizer_email: str | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime
    user_role: EventRole | None = None

    model_config = ConfigDict(from_attributes=True)


class InvitedEventOut(EventOut):
    invitation_role: InvitationRole
    invitation_status: InvitationStatus


class EventDetailOut(EventOut):
    invitations: list[InvitationOut] = Field(default_factory=list)
    attendance: list[AttendanceOut] = Field(default_factory=list)
    attendanceStats: AttendanceStats | None = None  # noqa: N815


class EventSearchFilters(BaseModel):
    keyword: str | None = None
    start_date: datetime.date | None = Field(default=None, alias="startDate")
    end_date: datetime.date | None = Field(default=None, alias="endDate")
    role: EventRole | None = None
    user_id: int | None = Field(default=None, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class MessageOut(BaseModel):
    message: str


class EventEnvelope(BaseModel):
    message: str
    event: EventOut


class EventDetailEnvelope(BaseModel):
    message: str
    event: EventDetailOut


class EventListOut(BaseModel):
    message: str
    events: list[EventOut]
    count: int


class InvitedEventListOut(BaseModel):
    message: str
    events: list[InvitedEventOut]
    count: int


class EventSearchOut(BaseModel):
    message: str
    events: list[EventOut]
    count: int
    filters: EventSearchFilters
