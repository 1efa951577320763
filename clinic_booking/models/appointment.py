from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # The doctor is referenced by username, not by users.id
    doctor_username = Column(String(100), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Appointment details, stored as entered by the patient
    appointment_date = Column(String(50), nullable=False)
    appointment_time = Column(String(50), nullable=False)
    problem_description = Column(Text, nullable=False)
    consulted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now())

    patient = relationship("User", back_populates="appointments")

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, patient_id={self.patient_id}, "
            f"doctor='{self.doctor_username}', date='{self.appointment_date}')>"
        )
