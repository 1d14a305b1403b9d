"""
Civic complaint model with its append-only status history
"""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, JSON
from sqlalchemy.orm import relationship

from civicresolve.database import Base


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    REOPENED = "reopened"


class ComplaintPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# History-only status; never stored in Complaint.status
EVALUATED = "evaluated"

REGISTERED_NOTE = "Complaint registered successfully"

PRIORITY_RANK = {
    ComplaintPriority.HIGH.value: 3,
    ComplaintPriority.MEDIUM.value: 2,
    ComplaintPriority.LOW.value: 1,
}


def _new_id() -> str:
    return str(uuid.uuid4())


class Complaint(Base):
    """Citizen-submitted civic issue report"""
    __tablename__ = "complaints"

    id = Column(String, primary_key=True, default=_new_id)
    tracking_id = Column(String, unique=True, nullable=False, index=True)

    # Report content
    title = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, default="Other", index=True)
    priority = Column(String, nullable=False, default=ComplaintPriority.MEDIUM.value)
    status = Column(String, nullable=False, default=ComplaintStatus.PENDING.value, index=True)

    # Location (0/0 means "not provided")
    latitude = Column(Float, nullable=False, default=0)
    longitude = Column(Float, nullable=False, default=0)
    address = Column(String, nullable=False, default="")
    state = Column(String, nullable=False, default="")
    district = Column(String, nullable=False, default="")
    city = Column(String, nullable=False, default="")
    landmark = Column(String, nullable=False, default="")

    photo = Column(String, nullable=True)  # Blob store URL
    votes = Column(Integer, nullable=False, default=0)

    # Triage / assignment
    department = Column(String, nullable=True)
    assigned_contractor_id = Column(String, nullable=True, index=True)  # Weak ref, no FK
    assigned_at = Column(DateTime, nullable=True)
    evaluating_department = Column(String, nullable=True)

    ai_analysis = Column(JSON, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    status_history = relationship(
        "StatusHistoryEntry",
        order_by="StatusHistoryEntry.id",
        cascade="all, delete-orphan",
        lazy="selectin",
        back_populates="complaint",
    )

    @property
    def location(self) -> dict:
        return {
            "lat": self.latitude,
            "lng": self.longitude,
            "address": self.address,
            "state": self.state,
            "district": self.district,
            "city": self.city,
            "landmark": self.landmark,
        }


class StatusHistoryEntry(Base):
    """One lifecycle transition; rows are only ever inserted"""
    __tablename__ = "complaint_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    complaint_id = Column(String, ForeignKey("complaints.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
    note = Column(Text, nullable=True)

    complaint = relationship("Complaint", back_populates="status_history")
