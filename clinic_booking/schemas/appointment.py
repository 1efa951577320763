"""Appointment schemas.

Responses carry the camelCase keys the web client reads. Fields are aliased
rather than renamed so FastAPI, which dumps by alias and then re-validates,
accepts its own output.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import List, Optional


class AppointmentCreate(BaseModel):
    """Booking request.

    Every field is optional at the schema level; the workflow reports absent
    ones together as a single MissingFieldError.
    """
    model_config = ConfigDict(populate_by_name=True)

    doctor_username: Optional[str] = Field(default=None, alias="doctorUsername")
    appointment_date: Optional[str] = Field(default=None, alias="appointmentDate")
    appointment_time: Optional[str] = Field(default=None, alias="appointmentTime")
    problem_description: Optional[str] = Field(default=None, alias="problemDescription")


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int = Field(alias="_id")
    doctor_username: str = Field(alias="doctorUsername")
    # Appointment.patient is the relationship, so read the column by name first
    patient_id: int = Field(
        validation_alias=AliasChoices("patient_id", "patient"),
        serialization_alias="patient",
    )
    appointment_date: str = Field(alias="appointmentDate")
    appointment_time: str = Field(alias="appointmentTime")
    problem_description: str = Field(alias="problemDescription")
    consulted: bool


class AppointmentHistoryResponse(BaseModel):
    appointments: List[AppointmentResponse]


class CompleteAppointmentResponse(BaseModel):
    message: str
    appointment: AppointmentResponse


class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    username: str = Field(alias="userName")


class PatientSummary(BaseModel):
    """Public patient profile attached to a doctor's pending appointment.

    ``id`` is the appointment's identifier, which the client posts back to
    ``/complete/{appointmentId}``.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="_id")
    username: str = Field(alias="userName")
    email: str = Field(alias="emailId")
    age: Optional[int] = None
    gender: Optional[str] = None
    contact: Optional[str] = Field(default=None, alias="contactNumber")


class UnconsultedAppointment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    appointment_date: str = Field(alias="appointmentDate")
    appointment_time: str = Field(alias="appointmentTime")
    problem_description: str = Field(alias="problemDescription")
    patient: PatientSummary
