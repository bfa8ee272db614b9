from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from typing import List
import logging

from ..models.user import User, NotificationType
from ..models.doctor import Doctor, DoctorStatus, EDITABLE_PROFILE_FIELDS
from ..core.exceptions import NotFoundError, InvalidTransitionError, ConcurrentUpdateError
from ..schemas.doctor import DoctorApplication, DoctorProfileUpdate
from .access import require_admin
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

class DoctorService:
    def __init__(self, db: Session):
        self.db = db
        self.notifications = NotificationService(db)

    def get_for_user(self, user_id: int) -> Doctor:
        doctor = self.db.query(Doctor).filter(Doctor.user_id == user_id).first()
        if not doctor:
            raise NotFoundError("Doctor profile not found.")
        return doctor

    def apply(self, user: User, application: DoctorApplication) -> Doctor:
        """Create the caller's application, or overwrite it while still pending."""
        doctor = self.db.query(Doctor).filter(Doctor.user_id == user.id).first()

        if doctor and doctor.status == DoctorStatus.APPROVED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Your doctor account is already approved."
            )
        if doctor and doctor.status == DoctorStatus.REJECTED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Your application was rejected. Please contact support."
            )

        fields = application.model_dump()
        if doctor:
            for field, value in fields.items():
                setattr(doctor, field, value)
            doctor.status = DoctorStatus.PENDING
        else:
            doctor = Doctor(user_id=user.id, status=DoctorStatus.PENDING, **fields)
            self.db.add(doctor)
        self._flush()

        self.notifications.notify_admins(
            NotificationType.DOCTOR_REQUEST,
            f"{doctor.fullname} applied for doctor account"
        )
        self._commit()
        self.db.refresh(doctor)

        logger.info(f"Doctor application {doctor.id} submitted by user {user.id}")
        return doctor

    def list_all(self) -> List[Doctor]:
        """Every doctor record regardless of status."""
        return self.db.query(Doctor).order_by(Doctor.id).all()

    def change_status(self, acting_user: User, doctor_id: int, new_status: DoctorStatus) -> Doctor:
        """Admin decision on an application; notifies the owner in the same transaction."""
        require_admin(acting_user)

        doctor = self.db.get(Doctor, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")

        if not doctor.can_transition_to(new_status):
            raise InvalidTransitionError("doctor", doctor.status.value, new_status.value)

        doctor.status = new_status
        self._flush()

        owner = self.db.get(User, doctor.user_id)
        if owner is None:
            logger.warning(f"Doctor {doctor.id} references missing user {doctor.user_id}")
        elif new_status == DoctorStatus.APPROVED:
            # Never cleared again on a later rejection
            owner.is_doctor = True

        self.notifications.notify(
            doctor.user_id,
            NotificationType.DOCTOR_STATUS,
            f"Your doctor account has been {new_status.value}"
        )
        self._commit()
        self.db.refresh(doctor)

        logger.info(f"Doctor {doctor.id} set to {new_status.value} by user {acting_user.id}")
        return doctor

    def update_profile(self, user: User, changes: DoctorProfileUpdate) -> Doctor:
        """Apply only the provided, non-empty fields to the caller's profile.

        Status is left as it is, so an approved doctor stays approved.
        """
        doctor = self.get_for_user(user.id)

        for field, value in changes.model_dump(exclude_unset=True).items():
            if field in EDITABLE_PROFILE_FIELDS and value:
                setattr(doctor, field, value)

        self._commit()
        self.db.refresh(doctor)
        return doctor

    def _flush(self):
        try:
            self.db.flush()
        except (StaleDataError, IntegrityError):
            # Lost a race on the same doctor record or on the one-per-user rule
            self.db.rollback()
            raise ConcurrentUpdateError()

    def _commit(self):
        try:
            self.db.commit()
        except (StaleDataError, IntegrityError):
            self.db.rollback()
            raise ConcurrentUpdateError()
