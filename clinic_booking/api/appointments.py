from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ..core.database import get_db
from .deps import get_current_user
from ..services.appointment_service import AppointmentService
from ..schemas.auth import MessageResponse
from ..schemas.appointment import (
    AppointmentCreate, AppointmentHistoryResponse, AppointmentResponse,
    CompleteAppointmentResponse, DoctorResponse, UnconsultedAppointment
)
from ..models.user import User

router = APIRouter(tags=["Appointments"])


@router.post("/bookappointment", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    booking: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Book an appointment for the logged-in patient."""
    AppointmentService(db).book_appointment(current_user, booking)
    return MessageResponse(message="Appointment booked successfully!")


@router.get("/getdoctors", response_model=List[DoctorResponse])
def get_doctors(db: Session = Depends(get_db)):
    """List the usernames of all registered doctors."""
    return AppointmentService(db).list_doctors()


@router.get("/getappointmenthistory", response_model=AppointmentHistoryResponse)
def get_appointment_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All appointments booked by the logged-in user. 404 when there are none."""
    appointments = AppointmentService(db).get_appointment_history(current_user)
    return AppointmentHistoryResponse(
        appointments=[AppointmentResponse.model_validate(a) for a in appointments]
    )


@router.get("/unconsulted", response_model=List[UnconsultedAppointment])
def get_unconsulted(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pending appointments booked with the logged-in doctor. 404 when there are none."""
    return AppointmentService(db).list_unconsulted(current_user.username)


@router.post("/complete/{appointment_id}", response_model=CompleteAppointmentResponse)
def complete_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark an appointment as consulted."""
    appointment = AppointmentService(db).complete_appointment(appointment_id)
    return CompleteAppointmentResponse(
        message="Appointment marked as consulted!",
        appointment=AppointmentResponse.model_validate(appointment),
    )
