"""In-memory appointment store.

The store is the single owner of the doctor and appointment collections for
the lifetime of one running application. It validates nothing beyond id
uniqueness on creation: dangling doctor references, inverted time ranges and
empty patient names are all accepted. Mutations that reference an unknown id
are silent no-ops and report ``False``; lookups return ``None``.

Appointments are indexed by calendar day and by doctor. Index buckets hold
insertion ordinals so that every query answers in the same order a scan of
the whole collection would. A lock makes each mutation a single step for
readers on other threads, since the Flask server handles requests in threads.
"""

from __future__ import annotations

import logging
import threading
import uuid
from bisect import insort
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple

from .models import (
    Appointment,
    AppointmentFormData,
    AppointmentStatus,
    Doctor,
    calendar_day,
)

logger = logging.getLogger(__name__)


def _uuid_identifier() -> str:
    return str(uuid.uuid4())


def _day_key(value: object) -> Optional[date]:
    try:
        return calendar_day(value)
    except ValueError:
        logger.debug("Appointment date %r cannot be indexed by day", value)
        return None


class _OrderedIndex:
    """Groups appointment ids by key, ordered by insertion ordinal."""

    def __init__(self) -> None:
        self._buckets: Dict[Hashable, List[Tuple[int, str]]] = {}

    def add(self, key: Hashable, ordinal: int, appointment_id: str) -> None:
        if key is None:
            return
        insort(self._buckets.setdefault(key, []), (ordinal, appointment_id))

    def remove(self, key: Hashable, ordinal: int, appointment_id: str) -> None:
        bucket = self._buckets.get(key)
        if not bucket:
            return
        bucket.remove((ordinal, appointment_id))
        if not bucket:
            del self._buckets[key]

    def ids(self, key: Hashable) -> List[str]:
        return [appointment_id for _, appointment_id in self._buckets.get(key, [])]

    def sizes(self) -> Dict[Hashable, int]:
        return {key: len(bucket) for key, bucket in self._buckets.items()}


class AppointmentStore:
    """Authoritative in-memory collections of doctors and appointments."""

    def __init__(
        self,
        doctors: Iterable[Doctor] = (),
        appointments: Iterable[Appointment] = (),
        *,
        selected_date: Optional[date] = None,
        id_factory: Callable[[], str] = _uuid_identifier,
    ) -> None:
        self._doctors: List[Doctor] = list(doctors)
        self._doctors_by_id: Dict[str, Doctor] = {}
        for doctor in self._doctors:
            self._doctors_by_id.setdefault(doctor.id, doctor)

        self._appointments: Dict[str, Appointment] = {}
        self._ordinals: Dict[str, int] = {}
        self._sequence = 0
        self._by_day = _OrderedIndex()
        self._by_doctor = _OrderedIndex()
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self.selected_date = selected_date

        for appointment in appointments:
            if appointment.id in self._appointments:
                raise ValueError(f"Duplicate appointment id '{appointment.id}'")
            self._insert(appointment)

    @classmethod
    def with_sample_data(cls, today: Optional[date] = None) -> "AppointmentStore":
        """Build a store seeded with the sample doctors and appointments."""

        from .seed import sample_appointments, sample_doctors

        today = today or date.today()
        return cls(
            sample_doctors(),
            sample_appointments(today),
            selected_date=today,
        )

    @property
    def doctors(self) -> List[Doctor]:
        return list(self._doctors)

    @property
    def appointments(self) -> List[Appointment]:
        with self._lock:
            return list(self._appointments.values())

    def __len__(self) -> int:
        return len(self._appointments)

    def set_selected_date(self, selected: Optional[date]) -> None:
        self.selected_date = selected

    def add_appointment(self, data: AppointmentFormData) -> Appointment:
        """Append a new ``pending`` appointment under a freshly generated id."""

        with self._lock:
            appointment = Appointment(
                id=self._new_identifier(),
                doctor_id=data.doctor_id,
                patient_name=data.patient_name,
                date=data.date,
                start_time=data.start_time,
                end_time=data.end_time,
                reason=data.reason,
                status=AppointmentStatus.PENDING,
            )
            self._insert(appointment)
        logger.info(
            "Added appointment %s for doctor %s on %s at %s",
            appointment.id,
            appointment.doctor_id,
            _day_key(appointment.date),
            appointment.start_time,
        )
        return appointment

    def edit_appointment(self, appointment_id: str, data: AppointmentFormData) -> bool:
        """Overwrite the form fields of an appointment, keeping id and status."""

        with self._lock:
            existing = self._appointments.get(appointment_id)
            if existing is None:
                logger.debug("Edit ignored; appointment %s does not exist", appointment_id)
                return False

            updated = replace(
                existing,
                doctor_id=data.doctor_id,
                patient_name=data.patient_name,
                date=data.date,
                start_time=data.start_time,
                end_time=data.end_time,
                reason=data.reason,
            )
            self._replace(existing, updated)
        logger.info("Edited appointment %s", appointment_id)
        return True

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> bool:
        with self._lock:
            existing = self._appointments.get(appointment_id)
            if existing is None:
                logger.debug("Status change ignored; appointment %s does not exist", appointment_id)
                return False

            status = AppointmentStatus(status)
            self._replace(existing, replace(existing, status=status))
        logger.info("Appointment %s status set to %s", appointment_id, status.value)
        return True

    def delete_appointment(self, appointment_id: str) -> bool:
        with self._lock:
            existing = self._appointments.get(appointment_id)
            if existing is None:
                logger.debug("Delete ignored; appointment %s does not exist", appointment_id)
                return False

            # Index entries go first so no index ever names a missing record.
            ordinal = self._ordinals[appointment_id]
            self._by_day.remove(_day_key(existing.date), ordinal, appointment_id)
            self._by_doctor.remove(existing.doctor_id, ordinal, appointment_id)
            del self._ordinals[appointment_id]
            del self._appointments[appointment_id]
        logger.info("Deleted appointment %s", appointment_id)
        return True

    def get_appointments_by_date(self, day: date) -> List[Appointment]:
        """Appointments on the same year, month and day as ``day``."""

        key = calendar_day(day)
        with self._lock:
            return [self._appointments[i] for i in self._by_day.ids(key)]

    def get_appointments_by_doctor(self, doctor_id: str) -> List[Appointment]:
        with self._lock:
            return [self._appointments[i] for i in self._by_doctor.ids(doctor_id)]

    def get_appointment_by_id(self, appointment_id: str) -> Optional[Appointment]:
        return self._appointments.get(appointment_id)

    def get_doctor_by_id(self, doctor_id: str) -> Optional[Doctor]:
        return self._doctors_by_id.get(doctor_id)

    def count_by_date(self, start: date, end: date) -> Dict[date, int]:
        """Number of appointments per day between ``start`` and ``end`` inclusive."""

        start, end = calendar_day(start), calendar_day(end)
        with self._lock:
            sizes = self._by_day.sizes()
        return {day: size for day, size in sorted(sizes.items()) if start <= day <= end}

    def _new_identifier(self) -> str:
        candidate = self._id_factory()
        while candidate in self._appointments:
            logger.warning("Generated appointment id %s already in use; retrying", candidate)
            candidate = self._id_factory()
        return candidate

    def _insert(self, appointment: Appointment) -> None:
        self._sequence += 1
        ordinal = self._sequence
        self._appointments[appointment.id] = appointment
        self._ordinals[appointment.id] = ordinal
        self._by_day.add(_day_key(appointment.date), ordinal, appointment.id)
        self._by_doctor.add(appointment.doctor_id, ordinal, appointment.id)

    def _replace(self, existing: Appointment, updated: Appointment) -> None:
        ordinal = self._ordinals[existing.id]
        old_day, new_day = _day_key(existing.date), _day_key(updated.date)
        if old_day != new_day:
            self._by_day.remove(old_day, ordinal, existing.id)
            self._by_day.add(new_day, ordinal, existing.id)
        if existing.doctor_id != updated.doctor_id:
            self._by_doctor.remove(existing.doctor_id, ordinal, existing.id)
            self._by_doctor.add(updated.doctor_id, ordinal, existing.id)
        self._appointments[existing.id] = updated
