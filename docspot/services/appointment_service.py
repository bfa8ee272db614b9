from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple
import logging
import time
import uuid

from ..models.user import User, NotificationType
from ..models.doctor import Doctor
from ..models.appointment import Appointment, AppointmentStatus
from ..core.config import settings
from ..core.exceptions import NotFoundError, InvalidTransitionError, ConcurrentUpdateError
from .access import require_appointment_status_permission
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

def store_document(content: bytes, original_filename: Optional[str]) -> str:
    """Write an uploaded document to the upload area and return its stored name."""
    suffix = Path(original_filename or "").suffix.lower()
    filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{suffix}"

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / filename).write_bytes(content)
    return filename

class AppointmentService:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    def book(
        self,
        user: User,
        doctor_id: int,
        appointment_date: date,
        document_filename: Optional[str] = None
    ) -> Appointment:
        """Create a pending appointment and tell the doctor's owner about it."""
        appointment = Appointment(
            user_id=user.id,
            doctor_id=doctor_id,
            date=appointment_date,
            document=document_filename,
            status=AppointmentStatus.PENDING,
        )
        self.db.add(appointment)
        self.db.flush()

        doctor = self.db.get(Doctor, doctor_id)
        if doctor is None:
            logger.warning(f"Appointment booked for unknown doctor {doctor_id}")
        else:
            self.notifications.notify(
                doctor.user_id,
                NotificationType.APPOINTMENT_REQUEST,
                "New appointment request received"
            )

        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} booked by user {user.id} with doctor {doctor_id}")
        return appointment

    def list_for_user(self, user_id: int) -> List[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.user_id == user_id
        ).order_by(Appointment.id).all()

    def list_for_doctor(self, doctor_id: int) -> List[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id
        ).order_by(Appointment.id).all()

    def my_appointments(self, user: User) -> Tuple[Doctor, List[Appointment]]:
        """The caller's doctor profile together with the appointments it received."""
        doctor = self.db.query(Doctor).filter(Doctor.user_id == user.id).first()
        if not doctor:
            raise NotFoundError("Doctor profile not found.")
        return doctor, self.list_for_doctor(doctor.id)

    def update_status(
        self,
        acting_user: User,
        appointment_id: int,
        new_status: AppointmentStatus
    ) -> Appointment:
        appointment = self.db.get(Appointment, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")

        doctor = self.db.get(Doctor, appointment.doctor_id)
        require_appointment_status_permission(acting_user, appointment, doctor, new_status)

        if not appointment.can_transition_to(new_status):
            raise InvalidTransitionError(
                "appointment", appointment.status.value, new_status.value
            )

        appointment.status = new_status
        try:
            self.db.flush()
        except StaleDataError:
            self.db.rollback()
            raise ConcurrentUpdateError()

        self.notifications.notify(
            appointment.user_id,
            NotificationType.APPOINTMENT_STATUS,
            f"Your appointment has been {new_status.value}"
        )
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} set to {new_status.value} by user {acting_user.id}"
        )
        return appointment
