from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventplanner.api.deps import get_current_user
from eventplanner.core.database import get_db
from eventplanner.models.users import User
from eventplanner.schemas.users import UserSearchOut
from eventplanner.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=UserSearchOut)
def search_users(
    email: str | None = Query(default=None, description="Part of the email to match"),
    limit: int = Query(default=user_service.DEFAULT_SEARCH_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    users = user_service.search_users(db, email, limit)
    return {"message": "Users retrieved successfully", "users": users, "count": len(users)}
