"""
Contractor model - reputation ledger fed by complaint evaluations
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime

from civicresolve.database import Base


class Contractor(Base):
    __tablename__ = "contractors"

    id = Column(String, primary_key=True)  # Externally assigned, e.g. "CTR-001"
    name = Column(String, nullable=False)

    # Score counters, changed only by evaluations
    points = Column(Integer, nullable=False, default=0)
    total_works = Column(Integer, nullable=False, default=0)

    quality_rating = Column(Float, nullable=False, default=0)

    registered_at = Column(DateTime, nullable=False, default=datetime.utcnow)
