from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date as date_type, datetime

from ..models.appointment import AppointmentStatus
from .doctor import DoctorResponse

class AppointmentStatusUpdate(BaseModel):
    appointment_id: int = Field(..., alias="appointmentId")
    status: AppointmentStatus

    class Config:
        populate_by_name = True

class AppointmentResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    doctor_id: int = Field(..., alias="doctorId")
    date: date_type
    document: Optional[str] = None
    status: AppointmentStatus
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True

class BookingResponse(BaseModel):
    success: bool = True
    message: str
    appointment: AppointmentResponse

class DoctorAppointments(BaseModel):
    doctor: DoctorResponse
    appointments: List[AppointmentResponse]
