from sqlalchemy import Column, Integer, String, DateTime, Float, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from ..core.database import Base

class DoctorStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

# Admin decisions; pending is only ever set by an application
DOCTOR_STATUS_TRANSITIONS = {
    DoctorStatus.PENDING: {DoctorStatus.APPROVED, DoctorStatus.REJECTED},
    DoctorStatus.APPROVED: {DoctorStatus.REJECTED},
    DoctorStatus.REJECTED: {DoctorStatus.APPROVED},
}

# Profile fields a doctor may edit after applying
EDITABLE_PROFILE_FIELDS = (
    "fullname", "phone", "address", "specialization", "experience", "fees", "timings",
)

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    # Owning user, at most one record each; not a foreign key, the owner may disappear
    user_id = Column(Integer, nullable=False, unique=True, index=True)

    # Profile
    fullname = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(255), nullable=True)
    specialization = Column(String(100), nullable=False)
    experience = Column(Integer, nullable=True)
    fees = Column(Float, nullable=True)
    timings = Column(JSON, nullable=False, default=list)

    status = Column(SQLEnum(DoctorStatus), nullable=False, default=DoctorStatus.PENDING)
    version = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}

    def can_transition_to(self, new_status: DoctorStatus) -> bool:
        return new_status in DOCTOR_STATUS_TRANSITIONS.get(self.status, set())

    def __repr__(self):
        return f"<Doctor(id={self.id}, name='{self.fullname}', status='{self.status}')>"
