from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

from database.models.user import UserStatus


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    avatar: Optional[str] = Field(default=None, max_length=1000)
    status: UserStatus = UserStatus.ACTIVE
    role_id: Optional[str] = None  # Defaults to the client role


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    avatar: Optional[str] = Field(default=None, max_length=1000)
    status: Optional[UserStatus] = None
    role_id: Optional[str] = None


class UserWithDetails(BaseModel):
    id: str
    email: str
    name: str
    phone_number: Optional[str]
    avatar: Optional[str]
    status: str
    role_id: str
    role_name: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    users: list[UserWithDetails]
    total: int
