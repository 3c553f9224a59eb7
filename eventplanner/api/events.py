import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventplanner.api.deps import get_current_user, get_optional_user
from eventplanner.core.database import get_db
from eventplanner.models.users import User
from eventplanner.schemas.events import (
    EventCreate,
    EventDetailEnvelope,
    EventEnvelope,
    EventListOut,
    EventRole,
    EventSearchFilters,
    EventSearchOut,
    EventUpdate,
    InvitedEventListOut,
    MessageOut,
)
from eventplanner.services import event_service

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event = event_service.create_event(db, user, payload)
    return {"message": "Event created successfully", "event": event}


@router.get("/organized", response_model=EventListOut)
def list_organized_events(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    events = event_service.list_organized(db, user.id)
    return {"message": "Events retrieved successfully", "events": events, "count": len(events)}


@router.get("/invited", response_model=InvitedEventListOut)
def list_invited_events(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    events = event_service.list_invited(db, user.id)
    return {
        "message": "Invited events retrieved successfully",
        "events": events,
        "count": len(events),
    }


@router.get("/search", response_model=EventSearchOut)
def search_events(
    keyword: str | None = Query(default=None, max_length=255),
    start_date: datetime.date | None = Query(default=None, alias="startDate"),
    end_date: datetime.date | None = Query(default=None, alias="endDate"),
    role: EventRole | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    user_id = user.id if user else None
    filters = EventSearchFilters(
        keyword=(keyword or "").strip() or None,
        start_date=start_date,
        end_date=end_date,
        role=role,
        user_id=user_id,
    )
    events = event_service.search_events(db, filters, user_id)
    return {
        "message": "Events retrieved successfully",
        "events": events,
        "count": len(events),
        "filters": filters.model_dump(by_alias=True),
    }


@router.get("/{event_id}", response_model=EventDetailEnvelope)
def get_event(
    event_id: int,
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    event = event_service.get_event_detail(db, event_id, user.id if user else None)
    return {"message": "Event retrieved successfully", "event": event}


@router.put("/{event_id}", response_model=EventEnvelope)
def update_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event = event_service.update_event(db, event_id, user.id, payload)
    return {"message": "Event updated successfully", "event": event}


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event_service.delete_event(db, event_id, user.id)
    return {"message": "Event deleted successfully"}
