from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

from ..core.config import settings
from .notification import NotificationResponse

class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., max_length=128)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters."
            )
        return v

class UserLogin(BaseModel):
    # Unknown or malformed addresses both end in "User not found"
    email: str
    password: str

class UserResponse(BaseModel):
    """Sanitized projection of a user; never carries the password or reset token."""

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    is_doctor: bool = Field(False, alias="isDoctor")
    is_admin: bool = Field(False, alias="isAdmin")
    notifications: List[NotificationResponse] = []
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True

class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserResponse

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class PasswordReset(BaseModel):
    email: EmailStr

class PasswordResetConfirm(BaseModel):
    email: EmailStr
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., alias="newPassword", max_length=128)
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")

    @field_validator("new_password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters."
            )
        return v

    class Config:
        populate_by_name = True
