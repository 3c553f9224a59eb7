from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: int
    email: str
    created_at: datetime | None = None

    model_config = ConfigDict(
        from_attributes=True,
    )


class UserEnvelope(BaseModel):
    message: str
    user: UserOut


class LoginOut(BaseModel):
    message: str
    token: str
    user: UserOut


class UserSearchOut(BaseModel):
    message: str
    users: list[UserOut]
    count: int
