"""Appointment scheduling core for the clinic calendar."""

from .models import (
    Appointment,
    AppointmentFormData,
    AppointmentStatus,
    Doctor,
    calendar_day,
)
from .slots import TIME_SLOTS, default_end_time, end_time_options, is_valid_slot
from .store import AppointmentStore

__all__ = [
    "Appointment",
    "AppointmentFormData",
    "AppointmentStatus",
    "AppointmentStore",
    "Doctor",
    "TIME_SLOTS",
    "calendar_day",
    "default_end_time",
    "end_time_options",
    "is_valid_slot",
]
