from .user import User, Notification, NotificationType
from .doctor import Doctor, DoctorStatus
from .appointment import Appointment, AppointmentStatus

__all__ = [
    "User",
    "Notification",
    "NotificationType",
    "Doctor",
    "DoctorStatus",
    "Appointment",
    "AppointmentStatus",
]
