"""
Treatments SQLAlchemy Models
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from clinicops.models.db.base import Base, TimestampMixin


class TreatmentProtocolModel(Base, TimestampMixin):
    """SQLAlchemy model for treatment protocols."""

    __tablename__ = "treatment_protocols"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TreatmentProtocolModel(id={self.id}, name='{self.name}')>"


class PatientTreatmentModel(Base, TimestampMixin):
    """SQLAlchemy model for patient treatments."""

    __tablename__ = "patient_treatments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    protocol_id = Column(Integer, ForeignKey("treatment_protocols.id"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    custom_medications = Column(JSON, nullable=True)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    protocol = relationship("TreatmentProtocolModel")

    __table_args__ = (Index("ix_patient_treatments_patient_window", "patient_id", "start_date", "end_date"),)

    def __repr__(self) -> str:
        return (
            f"<PatientTreatmentModel(id={self.id}, patient_id={self.patient_id}, "
            f"protocol_id={self.protocol_id}, start={self.start_date}, end={self.end_date})>"
        )
