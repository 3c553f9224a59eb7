import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class AttendanceStatus(StrEnum):
    going = "going"
    maybe = "maybe"
    not_going = "not_going"


class AttendanceSet(BaseModel):
    status: AttendanceStatus


class AttendanceStats(BaseModel):
    going: int = 0
    maybe: int = 0
    not_going: int = 0
    pending: int = 0
    total: int = 0


class AttendanceOut(BaseModel):
    id: int
    event_id: int
    user_id: int
    user_email: str | None = None
    status: AttendanceStatus
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class MyAttendanceOut(AttendanceOut):
    event_title: str
    event_date: datetime.date
    event_time: datetime.time
    location: str


class AttendanceEnvelope(BaseModel):
    message: str
    attendance: AttendanceOut | None


class EventAttendanceOut(BaseModel):
    message: str
    attendance: list[AttendanceOut]
    attendanceStats: AttendanceStats  # noqa: N815
    count: int


class MyAttendanceListOut(BaseModel):
    message: str
    attendance: list[MyAttendanceOut]
    count: int
