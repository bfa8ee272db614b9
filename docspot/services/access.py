"""
Ownership and role checks.

Every check is a plain function of the acting user and the resource, so route
handlers never compare identifiers inline.
"""
from typing import Optional

from ..core.security import AuthorizationError
from ..models.user import User
from ..models.doctor import Doctor
from ..models.appointment import Appointment, AppointmentStatus

# Statuses the owning doctor may set on an appointment
DOCTOR_SETTABLE_STATUSES = {
    AppointmentStatus.SCHEDULED,
    AppointmentStatus.REJECTED,
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
}

# Statuses the booking patient may set
PATIENT_SETTABLE_STATUSES = {AppointmentStatus.CANCELLED}

def is_admin(user: User) -> bool:
    return bool(user.is_admin)

def owns_doctor_profile(user: User, doctor: Optional[Doctor]) -> bool:
    return doctor is not None and doctor.user_id == user.id

def owns_appointment(user: User, appointment: Appointment) -> bool:
    return appointment.user_id == user.id

def require_admin(user: User) -> None:
    if not is_admin(user):
        raise AuthorizationError("Admin access required")

def can_set_appointment_status(
    user: User,
    appointment: Appointment,
    doctor: Optional[Doctor],
    new_status: AppointmentStatus
) -> bool:
    """Whether `user` may move `appointment` to `new_status`.

    `doctor` is the doctor record the appointment references, or None when the
    reference no longer resolves.
    """
    if is_admin(user):
        return True
    if owns_doctor_profile(user, doctor) and new_status in DOCTOR_SETTABLE_STATUSES:
        return True
    if owns_appointment(user, appointment) and new_status in PATIENT_SETTABLE_STATUSES:
        return True
    return False

def require_appointment_status_permission(
    user: User,
    appointment: Appointment,
    doctor: Optional[Doctor],
    new_status: AppointmentStatus
) -> None:
    if not can_set_appointment_status(user, appointment, doctor, new_status):
        raise AuthorizationError(
            f"You are not allowed to set this appointment to {new_status.value}"
        )
