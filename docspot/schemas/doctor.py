from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from ..models.doctor import DoctorStatus

class DoctorApplication(BaseModel):
    fullname: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=255)
    specialization: str = Field(..., min_length=1, max_length=100)
    experience: int = Field(..., ge=0)
    fees: float = Field(..., ge=0)
    timings: List[str] = []

class DoctorProfileUpdate(BaseModel):
    """Partial profile edit; empty or zero values leave the stored value alone."""

    fullname: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    fees: Optional[float] = Field(None, ge=0)
    timings: Optional[List[str]] = None

class DoctorStatusChange(BaseModel):
    doctor_id: int = Field(..., alias="doctorId")
    status: DoctorStatus

    class Config:
        populate_by_name = True

class DoctorResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    fullname: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    specialization: str
    experience: Optional[int] = None
    fees: Optional[float] = None
    timings: List[str] = []
    status: DoctorStatus
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True
