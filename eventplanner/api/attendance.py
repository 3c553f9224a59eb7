from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventplanner.api.deps import get_current_user
from eventplanner.core.database import get_db
from eventplanner.models.users import User
from eventplanner.schemas.attendance import (
    AttendanceEnvelope,
    AttendanceSet,
    AttendanceStatus,
    EventAttendanceOut,
    MyAttendanceListOut,
)
from eventplanner.services import attendance_service

router = APIRouter(tags=["attendance"])


@router.post("/events/{event_id}/attendance", response_model=AttendanceEnvelope)
def set_attendance(
    event_id: int,
    payload: AttendanceSet,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    attendance = attendance_service.set_attendance(db, event_id, user, payload.status)
    return {"message": "Attendance status updated successfully", "attendance": attendance}


@router.get("/events/{event_id}/attendance", response_model=EventAttendanceOut)
def list_event_attendance(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows, stats = attendance_service.list_event_attendance(db, event_id, user.id)
    return {
        "message": "Attendance retrieved successfully",
        "attendance": rows,
        "attendanceStats": stats,
        "count": len(rows),
    }


@router.get("/events/{event_id}/attendance/me", response_model=AttendanceEnvelope)
def get_my_attendance(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    attendance = attendance_service.get_my_attendance(db, event_id, user.id)
    if attendance is None:
        return {"message": "No attendance record found", "attendance": None}
    return {"message": "Attendance retrieved successfully", "attendance": attendance}


@router.get("/attendance", response_model=MyAttendanceListOut)
def list_my_attendance(
    status: AttendanceStatus | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = attendance_service.list_my_attendance(db, user.id, status)
    return {
        "message": "Attendance retrieved successfully",
        "attendance": rows,
        "count": len(rows),
    }
