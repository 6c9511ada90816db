"""Booking workflows behind the appointment form."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from scheduling import (
    Appointment,
    AppointmentFormData,
    AppointmentStore,
    calendar_day,
    default_end_time,
)

logger = logging.getLogger(__name__)


class AppointmentNotFound(LookupError):
    """Raised when a booking action references an unknown appointment."""

    def __init__(self, appointment_id: str) -> None:
        super().__init__(f"Appointment '{appointment_id}' does not exist")
        self.appointment_id = appointment_id


DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "09:30"


def send_notification(title: str, description: str) -> None:
    """Stub notification sender for booking confirmations."""

    logger.info("%s: %s", title, description)


def format_long_date(day: date) -> str:
    """Render ``day`` as e.g. ``October 20th, 2026``."""

    if 11 <= day.day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day.day % 10, "th")
    return f"{day:%B} {day.day}{suffix}, {day.year}"


def _check_required(form: AppointmentFormData) -> None:
    if not isinstance(form.doctor_id, str) or not form.doctor_id.strip():
        raise ValueError("Please select a doctor")
    if not isinstance(form.patient_name, str) or not form.patient_name.strip():
        raise ValueError("Patient name is required")


def prepare_form(
    *,
    doctor_id: str,
    patient_name: str,
    appointment_date: object,
    start_time: str = DEFAULT_START_TIME,
    end_time: Optional[str] = None,
    reason: Optional[str] = "",
) -> AppointmentFormData:
    """Normalise raw form input, filling in the end time when omitted."""

    start_time = start_time or DEFAULT_START_TIME
    form = AppointmentFormData(
        doctor_id=(doctor_id or "").strip(),
        patient_name=(patient_name or "").strip(),
        date=calendar_day(appointment_date),
        start_time=start_time,
        end_time=end_time or default_end_time(start_time) or start_time,
        reason=reason or "",
    )
    _check_required(form)
    return form


def blank_form(today: Optional[date] = None) -> AppointmentFormData:
    return AppointmentFormData(
        doctor_id="",
        patient_name="",
        date=today or date.today(),
        start_time=DEFAULT_START_TIME,
        end_time=DEFAULT_END_TIME,
        reason="",
    )


def load_form(store: AppointmentStore, appointment_id: str) -> Optional[AppointmentFormData]:
    """Form values for editing an existing appointment."""

    appointment = store.get_appointment_by_id(appointment_id)
    if appointment is None:
        return None
    return appointment.to_form()


def book_appointment(store: AppointmentStore, form: AppointmentFormData) -> Appointment:
    """Book an appointment and notify the user."""

    _check_required(form)
    appointment = store.add_appointment(form)
    send_notification(
        "Appointment booked",
        f"Appointment has been booked for {format_long_date(appointment.day)} "
        f"at {appointment.start_time}",
    )
    return appointment


def update_appointment(
    store: AppointmentStore, appointment_id: str, form: AppointmentFormData
) -> Appointment:
    """Apply edited form values to an existing appointment."""

    _check_required(form)
    if not store.edit_appointment(appointment_id, form):
        raise AppointmentNotFound(appointment_id)

    send_notification(
        "Appointment updated",
        f"Appointment has been updated for {format_long_date(calendar_day(form.date))} "
        f"at {form.start_time}",
    )
    return store.get_appointment_by_id(appointment_id)


def cancel_appointment(store: AppointmentStore, appointment_id: str) -> None:
    """Delete an existing appointment."""

    if not store.delete_appointment(appointment_id):
        raise AppointmentNotFound(appointment_id)

    send_notification("Appointment deleted", "The appointment has been cancelled and removed")
