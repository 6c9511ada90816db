"""Sample doctors and appointments loaded when the application starts."""

from __future__ import annotations

from datetime import date, timedelta
from typing import List

from .models import Appointment, AppointmentStatus, Doctor

_SAMPLE_DOCTORS = (
    ("1", "Dr. Jane Smith", "Cardiology"),
    ("2", "Dr. Michael Johnson", "Neurology"),
    ("3", "Dr. Sarah Williams", "Dermatology"),
    ("4", "Dr. Robert Davis", "Orthopedics"),
    ("5", "Dr. Emily Brown", "Pediatrics"),
)


def sample_doctors() -> List[Doctor]:
    return [
        Doctor(id=doctor_id, name=name, specialty=specialty, available=True)
        for doctor_id, name, specialty in _SAMPLE_DOCTORS
    ]


def sample_appointments(today: date) -> List[Appointment]:
    """Two appointments dated relative to ``today``."""

    return [
        Appointment(
            id="1",
            doctor_id="1",
            patient_name="John Doe",
            date=today + timedelta(days=1),
            start_time="09:00",
            end_time="09:30",
            reason="Annual checkup",
            status=AppointmentStatus.CONFIRMED,
        ),
        Appointment(
            id="2",
            doctor_id="2",
            patient_name="Jane Smith",
            date=today + timedelta(days=2),
            start_time="14:00",
            end_time="14:30",
            reason="Headache",
            status=AppointmentStatus.PENDING,
        ),
    ]
