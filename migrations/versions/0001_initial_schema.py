from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    invitation_role_enum = sa.Enum("organizer", "attendee", name="invitationrole")
    invitation_status_enum = sa.Enum(
        "pending", "accepted", "declined", name="invitationstatus"
    )
    attendance_status_enum = sa.Enum(
        "going", "maybe", "not_going", name="attendancestatus"
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        _timestamp("created_at"),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("event_time", sa.Time(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column(
            "organizer_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])
    op.create_index("ix_events_organizer_id", "events", ["organizer_id"])

    op.create_table(
        "event_invitations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "inviter_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "invitee_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "role", invitation_role_enum, nullable=False, server_default="attendee"
        ),
        sa.Column(
            "status", invitation_status_enum, nullable=False, server_default="pending"
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint(
            "event_id", "invitee_id", name="uq_event_invitations_event_invitee"
        ),
    )
    op.create_index(
        "ix_event_invitations_event_id", "event_invitations", ["event_id"]
    )
    op.create_index(
        "ix_event_invitations_invitee_id", "event_invitations", ["invitee_id"]
    )

    op.create_table(
        "event_attendance",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", attendance_status_enum, nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint(
            "event_id", "user_id", name="uq_event_attendance_event_user"
        ),
    )
    op.create_index("ix_event_attendance_event_id", "event_attendance", ["event_id"])
    op.create_index("ix_event_attendance_user_id", "event_attendance", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_event_attendance_user_id", table_name="event_attendance")
    op.drop_index("ix_event_attendance_event_id", table_name="event_attendance")
    op.drop_table("event_attendance")
    op.drop_index("ix_event_invitations_invitee_id", table_name="event_invitations")
    op.drop_index("ix_event_invitations_event_id", table_name="event_invitations")
    op.drop_table("event_invitations")
    op.drop_index("ix_events_organizer_id", table_name="events")
    op.drop_index("ix_events_event_date", table_name="events")
    op.drop_table("events")
    op.drop_table("users")

    bind = op.get_bind()
    for name in ("attendancestatus", "invitationstatus", "invitationrole"):
        sa.Enum(name=name).drop(bind, checkfirst=True)
