"""Month grid and day agenda view models built from the appointment store."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from scheduling import Appointment, AppointmentStore, calendar_day

UNKNOWN_DOCTOR = "Unknown Doctor"
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
PREVIEW_LIMIT = 2

_SUNDAY_FIRST = calendar.Calendar(firstweekday=calendar.SUNDAY)


@dataclass
class DayCell:
    day: date
    appointment_count: int = 0
    previews: List[str] = field(default_factory=list)
    overflow: int = 0
    is_today: bool = False
    is_selected: bool = False
    in_month: bool = True


@dataclass
class MonthGrid:
    year: int
    month: int
    title: str
    weeks: List[List[DayCell]]
    weekday_labels: Tuple[str, ...] = WEEKDAY_LABELS


@dataclass
class AgendaEntry:
    appointment_id: str
    time_range: str
    patient_name: str
    doctor_name: str
    status: str
    status_label: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.appointment_id,
            "time_range": self.time_range,
            "patient_name": self.patient_name,
            "doctor_name": self.doctor_name,
            "status": self.status,
            "status_label": self.status_label,
            "reason": self.reason,
        }


@dataclass
class DayAgenda:
    day: date
    title: str
    summary: str
    entries: List[AgendaEntry]

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.day.isoformat(),
            "title": self.title,
            "summary": self.summary,
            "appointments": [entry.to_dict() for entry in self.entries],
        }


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months forward (or back when negative)."""

    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _preview(appointment: Appointment) -> str:
    return f"{appointment.start_time} - {appointment.patient_name}"


def month_grid(
    store: AppointmentStore,
    year: int,
    month: int,
    today: Optional[date] = None,
) -> MonthGrid:
    today = today or date.today()
    selected = calendar_day(store.selected_date) if store.selected_date else None

    weeks: List[List[DayCell]] = []
    for week in _SUNDAY_FIRST.monthdatescalendar(year, month):
        cells: List[DayCell] = []
        for day in week:
            appointments = store.get_appointments_by_date(day)
            cells.append(
                DayCell(
                    day=day,
                    appointment_count=len(appointments),
                    previews=[_preview(a) for a in appointments[:PREVIEW_LIMIT]],
                    overflow=max(0, len(appointments) - PREVIEW_LIMIT),
                    is_today=day == today,
                    is_selected=day == selected,
                    in_month=day.month == month,
                )
            )
        weeks.append(cells)

    return MonthGrid(
        year=year,
        month=month,
        title=date(year, month, 1).strftime("%B %Y"),
        weeks=weeks,
    )


def _summary(count: int) -> str:
    if not count:
        return "No appointments scheduled for this day"
    return f"{count} appointment{'' if count == 1 else 's'} scheduled"


def day_agenda(store: AppointmentStore, day: date) -> DayAgenda:
    day = calendar_day(day)
    entries: List[AgendaEntry] = []
    for appointment in store.get_appointments_by_date(day):
        doctor = store.get_doctor_by_id(appointment.doctor_id)
        entries.append(
            AgendaEntry(
                appointment_id=appointment.id,
                time_range=f"{appointment.start_time} - {appointment.end_time}",
                patient_name=appointment.patient_name,
                doctor_name=doctor.name if doctor else UNKNOWN_DOCTOR,
                status=appointment.status.value,
                status_label=appointment.status.label,
                reason=appointment.reason,
            )
        )
    return DayAgenda(
        day=day,
        title=f"Appointments for {day:%B} {day.day}, {day.year}",
        summary=_summary(len(entries)),
        entries=entries,
    )
