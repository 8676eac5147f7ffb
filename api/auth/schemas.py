from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional


class RegisterRequest(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    phone_number: Optional[str] = Field(default=None, max_length=50)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MePermission(BaseModel):
    id: str
    name: str
    path: str
    method: str
    module: str

    class Config:
        from_attributes = True


class MeRole(BaseModel):
    id: str
    name: str
    description: Optional[str]

    class Config:
        from_attributes = True


class MeResponse(BaseModel):
    id: str
    email: str
    name: str
    phone_number: Optional[str]
    status: str
    created_at: datetime
    role: MeRole
    permissions: list[MePermission]
