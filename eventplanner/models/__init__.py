from eventplanner.core.database import Base
from eventplanner.models.events import Attendance, Event, Invitation
from eventplanner.models.users import User

__all__ = [
    "Attendance",
    "Base",
    "Event",
    "Invitation",
    "User",
]
