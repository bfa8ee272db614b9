from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class NotificationType(str, enum.Enum):
    DOCTOR_REQUEST = "doctor-request"
    DOCTOR_STATUS = "doctor-status"
    APPOINTMENT_REQUEST = "appointment-request"
    APPOINTMENT_STATUS = "appointment-status"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    # Uniqueness is checked on registration, not enforced by the table
    email = Column(String(255), index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)

    # Role flags
    is_doctor = Column(Boolean, default=False, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Password reset
    reset_token = Column(String(255), nullable=True)
    reset_token_expires = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    notifications = relationship(
        "Notification",
        primaryjoin="User.id == foreign(Notification.user_id)",
        order_by="Notification.id",
        viewonly=True,
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', admin={self.is_admin}, doctor={self.is_doctor})>"

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    type = Column(SQLEnum(NotificationType), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
