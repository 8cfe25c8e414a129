from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class Credentials(BaseModel):
    """Schema for owner setup and login"""
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)


class AdminIdentity(BaseModel):
    username: str
    role: str


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str
    admin: AdminIdentity


class SetupStatus(BaseModel):
    success: bool = True
    needs_setup: bool
    owner_exists: bool


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, description="New password must be at least 6 characters long")


class AdminProfile(BaseModel):
    username: str
    role: str
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True
