"""
Clinic Booking Service

A FastAPI backend where patients book appointments with doctors and doctors
close out their pending consultations, with JWT-based authentication.
"""

__version__ = "1.0.0"
