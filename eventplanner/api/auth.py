from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from eventplanner.api.deps import ACCESS_COOKIE, get_current_user
from eventplanner.core.config import get_settings
from eventplanner.core.database import get_db
from eventplanner.core.security import create_access
from eventplanner.models.users import User
from eventplanner.schemas.events import MessageOut
from eventplanner.schemas.users import (
    LoginIn,
    LoginOut,
    UserCreate,
    UserEnvelope,
    UserOut,
)
from eventplanner.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    user = user_service.register_user(db, payload)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    settings = get_settings()
    user = user_service.authenticate(db, payload)
    access = create_access(str(user.id), user.email)

    body = LoginOut(
        message="Login successful",
        token=access,
        user=UserOut.model_validate(user),
    )
    resp = JSONResponse(body.model_dump(mode="json"))
    resp.headers["Cache-Control"] = "no-store"
    resp.set_cookie(
        key=ACCESS_COOKIE,
        value=access,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.access_min * 60,
        path="/",
    )
    return resp


@router.get("/me", response_model=UserEnvelope)
def me(user: User = Depends(get_current_user)):
    return {"message": "User retrieved successfully", "user": user}


@router.post("/logout", response_model=MessageOut)
def logout():
    resp = JSONResponse({"message": "Logged out"})
    resp.headers["Cache-Control"] = "no-store"
    resp.delete_cookie(key=ACCESS_COOKIE, path="/")
    return resp
