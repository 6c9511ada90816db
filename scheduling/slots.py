"""Half-hour scheduling slots offered by the booking form."""

from __future__ import annotations

from datetime import time, timedelta, datetime
from typing import List, Optional

SLOT_MINUTES = 30
FIRST_SLOT = time(hour=8, minute=0)
LAST_SLOT = time(hour=17, minute=30)


def _build_slots() -> List[str]:
    slots: List[str] = []
    current = datetime.combine(datetime.min.date(), FIRST_SLOT)
    last = datetime.combine(datetime.min.date(), LAST_SLOT)
    while current <= last:
        slots.append(current.strftime("%H:%M"))
        current += timedelta(minutes=SLOT_MINUTES)
    return slots


TIME_SLOTS: List[str] = _build_slots()


def is_valid_slot(label: str) -> bool:
    return label in TIME_SLOTS


def default_end_time(start_time: str) -> Optional[str]:
    """Return the slot following ``start_time``, if there is one."""

    try:
        index = TIME_SLOTS.index(start_time)
    except ValueError:
        return None
    if index + 1 >= len(TIME_SLOTS):
        return None
    return TIME_SLOTS[index + 1]


def end_time_options(start_time: str) -> List[str]:
    """Slots that may end an appointment starting at ``start_time``."""

    # HH:MM labels sort lexically in time order.
    return [slot for slot in TIME_SLOTS if slot > start_time]
