from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from ..models.appointment import Appointment
from ..models.user import User
from ..core.security import UserRole
from ..core.exceptions import MissingFieldError, NotFoundError, InternalStoreError
from ..schemas.appointment import (
    AppointmentCreate, DoctorResponse, PatientSummary, UnconsultedAppointment
)

logger = logging.getLogger(__name__)

# Range of the Integer primary key column (32-bit on PostgreSQL)
MIN_ROW_ID = -(2 ** 31)
MAX_ROW_ID = 2 ** 31 - 1

REQUIRED_BOOKING_FIELDS = {
    "doctor_username": "doctorUsername",
    "appointment_date": "appointmentDate",
    "appointment_time": "appointmentTime",
    "problem_description": "problemDescription",
}


class AppointmentService:
    """Booking and consultation workflow.

    Two behaviours are kept on purpose until product decides otherwise: an
    empty history or pending list is reported as NotFound rather than an
    empty collection, and any authenticated user may complete any
    appointment.
    """

    def __init__(self, db: Session):
        self.db = db

    def book_appointment(self, patient: User, booking: AppointmentCreate) -> Appointment:
        """Create an unconsulted appointment for ``patient``.

        The doctor username, date and time are stored as given; there is no
        check that the doctor exists, that the slot is in the future or that
        it is free.
        """
        missing = [
            wire_name
            for field, wire_name in REQUIRED_BOOKING_FIELDS.items()
            if not getattr(booking, field)
        ]
        if missing:
            logger.warning(f"book_appointment: patient id={patient.id} omitted {missing}")
            raise MissingFieldError(missing)

        appointment = Appointment(
            doctor_username=booking.doctor_username,
            patient_id=patient.id,
            appointment_date=booking.appointment_date,
            appointment_time=booking.appointment_time,
            problem_description=booking.problem_description,
            consulted=False,
        )

        try:
            self.db.add(appointment)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                f"book_appointment: failed to save appointment for patient id={patient.id} "
                f"with {booking.doctor_username}"
            )
            raise InternalStoreError("Error booking appointment.")

        self.db.refresh(appointment)
        logger.info(
            f"Booked appointment id={appointment.id} for patient id={patient.id} "
            f"with {appointment.doctor_username}"
        )
        return appointment

    def list_doctors(self) -> List[DoctorResponse]:
        doctors = self._run(
            "list_doctors",
            lambda: self.db.query(User).filter(User.role == UserRole.DOCTOR).order_by(User.id).all(),
        )
        return [DoctorResponse.model_validate(doctor) for doctor in doctors]

    def get_appointment_history(self, patient: User) -> List[Appointment]:
        appointments = self._run(
            f"get_appointment_history(patient id={patient.id})",
            lambda: (
                self.db.query(Appointment)
                .filter(Appointment.patient_id == patient.id)
                .order_by(Appointment.id)
                .all()
            ),
        )
        if not appointments:
            logger.info(f"No appointments for patient id={patient.id}")
            raise NotFoundError("No appointments found.")
        return appointments

    def list_unconsulted(self, doctor_username: str) -> List[UnconsultedAppointment]:
        """Pending appointments for ``doctor_username`` with each patient's profile.

        A dangling patient reference fails the whole listing.
        """
        operation = f"list_unconsulted(doctor={doctor_username})"
        appointments = self._run(
            operation,
            lambda: (
                self.db.query(Appointment)
                .filter(
                    Appointment.doctor_username == doctor_username,
                    Appointment.consulted.is_(False),
                )
                .order_by(Appointment.id)
                .all()
            ),
        )
        if not appointments:
            logger.info(f"No unconsulted appointments for {doctor_username}")
            raise NotFoundError("No unconsulted appointments found for this doctor.")

        result = []
        for appointment in appointments:
            patient = self._run(operation, lambda: self.db.get(User, appointment.patient_id))
            if patient is None:
                logger.error(
                    f"{operation}: appointment id={appointment.id} references "
                    f"missing patient id={appointment.patient_id}"
                )
                raise InternalStoreError(
                    f"Patient record {appointment.patient_id} for appointment {appointment.id} is missing"
                )

            result.append(UnconsultedAppointment(
                appointment_date=appointment.appointment_date,
                appointment_time=appointment.appointment_time,
                problem_description=appointment.problem_description,
                patient=PatientSummary(
                    id=appointment.id,
                    username=patient.username,
                    email=patient.email,
                    age=patient.age,
                    gender=patient.gender,
                    contact=patient.contact,
                ),
            ))

        return result

    def complete_appointment(self, appointment_id: str) -> Appointment:
        """Mark an appointment consulted. Completing it again is a no-op."""
        appointment = None
        try:
            key = int(appointment_id)
        except ValueError:
            key = None
        if key is not None and not MIN_ROW_ID <= key <= MAX_ROW_ID:
            key = None
        if key is not None:
            appointment = self._run(
                f"complete_appointment(id={appointment_id})",
                lambda: self.db.get(Appointment, key),
            )
        if appointment is None:
            logger.warning(f"complete_appointment: appointment id={appointment_id} not found")
            raise NotFoundError("Appointment not found.")

        appointment.consulted = True
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"complete_appointment: failed to update appointment id={appointment_id}")
            raise InternalStoreError()

        self.db.refresh(appointment)
        logger.info(f"Appointment id={appointment_id} marked as consulted")
        return appointment

    def _run(self, operation: str, query):
        try:
            return query()
        except SQLAlchemyError:
            logger.exception(f"{operation}: store query failed")
            raise InternalStoreError()
