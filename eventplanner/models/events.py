from __future__ import annotations

import datetime

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    String,
    Text,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventplanner.core.database import Base
from eventplanner.models.users import User
from eventplanner.schemas.attendance import AttendanceStatus
from eventplanner.schemas.invitations import InvitationRole, InvitationStatus


def _created_at() -> Mapped[datetime.datetime]:
    return mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )


def _updated_at() -> Mapped[datetime.datetime]:
    return mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        init=False,
    )


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    title: Mapped[str] = mapped_column(String(255))
    event_date: Mapped[datetime.date] = mapped_column(Date, index=True)
    event_time: Mapped[datetime.time] = mapped_column(Time)
    location: Mapped[str] = mapped_column(String(255))
    organizer_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    organizer: Mapped[User] = relationship(
        back_populates="organized_events", lazy="joined", init=False
    )
    description: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime.datetime] = _created_at()
    updated_at: Mapped[datetime.datetime] = _updated_at()

    invitations: Mapped[list[Invitation]] = relationship(
        "Invitation",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        init=False,
        order_by=lambda: Invitation.created_at.desc(),
    )
    attendance: Mapped[list[Attendance]] = relationship(
        "Attendance",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        init=False,
        order_by=lambda: Attendance.updated_at.desc(),
    )

    @property
    def organizer_email(self) -> str | None:
        return self.organizer.email if self.organizer else None


class Invitation(Base):
    __tablename__ = "event_invitations"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), index=True
    )
    event: Mapped[Event] = relationship(back_populates="invitations", init=False)
    inviter_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    inviter: Mapped[User] = relationship(foreign_keys=[inviter_id], init=False)
    invitee_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    invitee: Mapped[User] = relationship(foreign_keys=[invitee_id], init=False)

    role: Mapped[InvitationRole] = mapped_column(
        Enum(
            InvitationRole,
            name="invitationrole",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        default=InvitationRole.attendee,
        server_default=InvitationRole.attendee.value,
    )
    status: Mapped[InvitationStatus] = mapped_column(
        Enum(
            InvitationStatus,
            name="invitationstatus",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        default=InvitationStatus.pending,
        server_default=InvitationStatus.pending.value,
    )
    created_at: Mapped[datetime.datetime] = _created_at()
    updated_at: Mapped[datetime.datetime] = _updated_at()

    __table_args__ = (
        UniqueConstraint("event_id", "invitee_id", name="uq_event_invitations_event_invitee"),
    )

    @property
    def invitee_email(self) -> str | None:
        return self.invitee.email if self.invitee else None

    @property
    def inviter_email(self) -> str | None:
        return self.inviter.email if self.inviter else None

    @property
    def event_title(self) -> str:
        return self.event.title

    @property
    def event_date(self) -> datetime.date:
        return self.event.event_date

    @property
    def event_time(self) -> datetime.time:
        return self.event.event_time

    @property
    def location(self) -> str:
        return self.event.location


class Attendance(Base):
    __tablename__ = "event_attendance"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), index=True
    )
    event: Mapped[Event] = relationship(back_populates="attendance", init=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    user: Mapped[User] = relationship(init=False)
    status: Mapped[AttendanceStatus] = mapped_column(
        Enum(
            AttendanceStatus,
            name="attendancestatus",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        )
    )
    created_at: Mapped[datetime.datetime] = _created_at()
    updated_at: Mapped[datetime.datetime] = _updated_at()

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_attendance_event_user"),
    )

    @property
    def user_email(self) -> str | None:
        return self.user.email if self.user else None

    @property
    def event_title(self) -> str:
        return self.event.title

    @property
    def event_date(self) -> datetime.date:
        return self.event.event_date

    @property
    def event_time(self) -> datetime.time:
        return self.event.event_time

    @property
    def location(self) -> str:
        return self.event.location
