from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_user, rate_limit
from ...services.auth_service import AuthService
from ...services.notification_service import NotificationService
from ...schemas.user import (
    UserLogin, UserRegister, LoginResponse, UserResponse, MessageResponse,
    PasswordReset, PasswordResetConfirm
)
from ...schemas.notification import NotificationPage, NotificationResponse, NotificationsCleared
from ...models.user import User

router = APIRouter(prefix="/users", tags=["Users"])

@router.post("/register", response_model=MessageResponse)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit("register"))
):
    """Register a new user."""
    AuthService(db).register_user(user_data)
    return MessageResponse(message="Registered Successfully")

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db)
):
    """Authenticate user and return a signed token."""
    return AuthService(db).authenticate_user(login_data)

@router.get("/profile", response_model=UserResponse)
async def get_profile(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return UserResponse.model_validate(current_user)

@router.get("/get-all-users", response_model=List[UserResponse])
async def get_all_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List every user. Any authenticated caller may use this."""
    return [UserResponse.model_validate(user) for user in AuthService(db).list_users()]

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    reset_data: PasswordReset,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit("forgot-password"))
):
    """Request password reset."""
    AuthService(db).request_password_reset(reset_data.email)
    return MessageResponse(message="Password reset link sent to your email.")

@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    reset_data: PasswordResetConfirm,
    db: Session = Depends(get_db)
):
    """Reset password using reset token."""
    AuthService(db).reset_password(reset_data)
    return MessageResponse(message="Password reset successful. You can now log in.")

@router.get("/notifications", response_model=NotificationPage)
async def list_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    items, total, unread = NotificationService(db).list_for_user(current_user.id, skip, limit)
    return NotificationPage(
        total=total,
        unread=unread,
        skip=skip,
        limit=limit,
        items=[NotificationResponse.model_validate(item) for item in items],
    )

@router.post("/notifications/mark-all-read", response_model=MessageResponse)
async def mark_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated = NotificationService(db).mark_all_read(current_user.id)
    return MessageResponse(message=f"{updated} notifications marked as read")

@router.delete("/notifications", response_model=NotificationsCleared)
async def clear_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return NotificationsCleared(cleared=NotificationService(db).clear(current_user.id))
