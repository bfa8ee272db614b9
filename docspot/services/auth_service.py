from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from datetime import datetime, timedelta
from typing import List
import logging

from ..models.user import User
from ..core.config import settings
from ..core.exceptions import NotFoundError, EmailDeliveryError
from ..core.security import (
    verify_password, get_password_hash, create_access_token,
    generate_password_reset_token, tokens_match
)
from ..schemas.user import (
    UserLogin, UserRegister, LoginResponse, UserResponse, PasswordResetConfirm
)
from .email_service import build_reset_link, send_password_reset_email

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new user."""
        # Check if user already exists
        existing_user = self.db.query(User).filter(
            User.email == user_data.email
        ).first()

        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists"
            )

        admin_emails = {email.lower() for email in settings.ADMIN_EMAILS}

        new_user = User(
            name=user_data.name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            phone=user_data.phone,
            is_doctor=False,
            is_admin=user_data.email.lower() in admin_emails,
        )

        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)

        logger.info(f"Registered user {new_user.id} ({new_user.email})")
        return new_user

    def authenticate_user(self, login_data: UserLogin) -> LoginResponse:
        """Verify credentials and issue a signed token."""
        user = self.db.query(User).filter(
            User.email == login_data.email.strip()
        ).first()

        if not user:
            raise NotFoundError("User not found")

        if not verify_password(login_data.password, user.password_hash):
            logger.info(f"Failed login for user {user.id}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        return LoginResponse(
            token=create_access_token(user.id),
            user=UserResponse.model_validate(user)
        )

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def request_password_reset(self, email: str) -> None:
        """Store a fresh reset token and email the reset link.

        The token is committed before dispatch and stays valid even when the
        email cannot be sent.
        """
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise NotFoundError("No account found with that email address.")

        reset_token = generate_password_reset_token()
        user.reset_token = reset_token
        user.reset_token_expires = datetime.utcnow() + timedelta(
            minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES
        )
        self.db.commit()

        try:
            send_password_reset_email(
                user.email, user.name, build_reset_link(user.email, reset_token)
            )
        except EmailDeliveryError as e:
            logger.error(f"Password reset email to user {user.id} failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to send reset email. Please try again."
            )

    def reset_password(self, reset_data: PasswordResetConfirm) -> None:
        """Reset password using reset token."""
        if (
            reset_data.confirm_password is not None
            and reset_data.confirm_password != reset_data.new_password
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Passwords do not match"
            )

        user = self.db.query(User).filter(User.email == reset_data.email).first()
        if not user:
            raise NotFoundError("User not found.")

        if not tokens_match(reset_data.token, user.reset_token):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired reset link."
            )

        if not user.reset_token_expires or datetime.utcnow() > user.reset_token_expires:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Reset link has expired. Please request a new one."
            )

        user.password_hash = get_password_hash(reset_data.new_password)
        user.reset_token = None
        user.reset_token_expires = None
        self.db.commit()

        logger.info(f"Password reset for user {user.id}")
