from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_current_user
from ...services.appointment_service import AppointmentService, store_document
from ...schemas.appointment import (
    AppointmentResponse, AppointmentStatusUpdate, BookingResponse, DoctorAppointments
)
from ...schemas.doctor import DoctorResponse
from ...models.user import User

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.post("/book-appointment", response_model=BookingResponse)
async def book_appointment(
    doctor_id: int = Form(..., alias="doctorId"),
    appointment_date: date = Form(..., alias="date"),
    document: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Book an appointment; the optional file is stored before the record."""
    document_filename = None
    if document is not None and document.filename:
        document_filename = store_document(await document.read(), document.filename)

    appointment = AppointmentService(db).book(
        current_user, doctor_id, appointment_date, document_filename
    )
    return BookingResponse(
        message="Appointment booked successfully",
        appointment=AppointmentResponse.model_validate(appointment),
    )

@router.post("/user-appointments", response_model=List[AppointmentResponse])
async def user_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Appointments booked by the caller."""
    appointments = AppointmentService(db).list_for_user(current_user.id)
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.get("/my-appointments", response_model=DoctorAppointments)
async def my_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The caller's doctor profile and the appointments made with it."""
    doctor, appointments = AppointmentService(db).my_appointments(current_user)
    return DoctorAppointments(
        doctor=DoctorResponse.model_validate(doctor),
        appointments=[AppointmentResponse.model_validate(a) for a in appointments],
    )

@router.get("/doctor-appointments/{doctor_id}", response_model=List[AppointmentResponse])
async def doctor_appointments(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    appointments = AppointmentService(db).list_for_doctor(doctor_id)
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.post("/update-status", response_model=AppointmentResponse)
async def update_status(
    update: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    appointment = AppointmentService(db).update_status(
        current_user, update.appointment_id, update.status
    )
    return AppointmentResponse.model_validate(appointment)
