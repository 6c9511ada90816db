"""Data models shared by the appointment store and its consumers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict


class AppointmentStatus(str, Enum):
    """Lifecycle label of an appointment. No transition rules apply."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Doctor:
    """Care provider referenced by appointments."""

    id: str
    name: str
    specialty: str
    available: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "specialty": self.specialty,
            "available": self.available,
        }


@dataclass(frozen=True)
class AppointmentFormData:
    """Fields a user supplies when booking or editing an appointment."""

    doctor_id: str
    patient_name: str
    date: date
    start_time: str
    end_time: str
    reason: str = ""


@dataclass(frozen=True)
class Appointment:
    """Data model for stored appointments."""

    id: str
    doctor_id: str
    patient_name: str
    date: date
    start_time: str
    end_time: str
    reason: str = ""
    status: AppointmentStatus = AppointmentStatus.PENDING

    @property
    def day(self) -> date:
        return calendar_day(self.date)

    def to_form(self) -> AppointmentFormData:
        return AppointmentFormData(
            doctor_id=self.doctor_id,
            patient_name=self.patient_name,
            date=self.day,
            start_time=self.start_time,
            end_time=self.end_time,
            reason=self.reason,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "doctor_id": self.doctor_id,
            "patient_name": self.patient_name,
            "date": self.day.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "reason": self.reason,
            "status": self.status.value,
        }


def calendar_day(value: object) -> date:
    """Reduce a date, datetime or ISO string to its year/month/day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value).date()
        except ValueError as exc:
            raise ValueError("Appointment dates must be ISO formatted") from exc
    raise ValueError("Unsupported appointment date format")
