"""Booking workflows for the clinic calendar."""

from .appointments import (
    AppointmentNotFound,
    blank_form,
    book_appointment,
    cancel_appointment,
    load_form,
    prepare_form,
    update_appointment,
)

__all__ = [
    "AppointmentNotFound",
    "blank_form",
    "book_appointment",
    "cancel_appointment",
    "load_form",
    "prepare_form",
    "update_appointment",
]
