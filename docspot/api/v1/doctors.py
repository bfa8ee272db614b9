from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_user
from ...services.doctor_service import DoctorService
from ...schemas.doctor import (
    DoctorApplication, DoctorProfileUpdate, DoctorStatusChange, DoctorResponse
)
from ...schemas.user import MessageResponse
from ...models.user import User

router = APIRouter(prefix="/doctors", tags=["Doctors"])

@router.post("/apply-doctor", response_model=MessageResponse)
async def apply_doctor(
    application: DoctorApplication,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Submit, or resubmit while pending, the caller's doctor application."""
    DoctorService(db).apply(current_user, application)
    return MessageResponse(message="Doctor Application Submitted")

@router.get("/get-all-doctors", response_model=List[DoctorResponse])
async def get_all_doctors(db: Session = Depends(get_db)):
    """Public list of doctors in every status; clients filter to approved ones."""
    return [DoctorResponse.model_validate(d) for d in DoctorService(db).list_all()]

@router.post("/change-status", response_model=DoctorResponse)
async def change_status(
    change: DoctorStatusChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Approve or reject an application (admin only)."""
    doctor = DoctorService(db).change_status(current_user, change.doctor_id, change.status)
    return DoctorResponse.model_validate(doctor)

@router.put("/update-profile", response_model=DoctorResponse)
async def update_profile(
    changes: DoctorProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    doctor = DoctorService(db).update_profile(current_user, changes)
    return DoctorResponse.model_validate(doctor)
