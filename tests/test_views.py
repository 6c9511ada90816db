import unittest
from datetime import date

from scheduling import (
    TIME_SLOTS,
    AppointmentFormData,
    AppointmentStore,
    default_end_time,
    end_time_options,
    is_valid_slot,
)
from ui.views import UNKNOWN_DOCTOR, day_agenda, month_grid, shift_month

TODAY = date(2026, 10, 19)


def _form(day: date, start: str, patient: str, doctor_id: str = "1") -> AppointmentFormData:
    return AppointmentFormData(
        doctor_id=doctor_id,
        patient_name=patient,
        date=day,
        start_time=start,
        end_time=default_end_time(start),
        reason="",
    )


class SlotTests(unittest.TestCase):
    def test_slot_range(self) -> None:
        self.assertEqual(len(TIME_SLOTS), 20)
        self.assertEqual(TIME_SLOTS[0], "08:00")
        self.assertEqual(TIME_SLOTS[-1], "17:30")
        self.assertIn("12:30", TIME_SLOTS)

    def test_default_end_time(self) -> None:
        self.assertEqual(default_end_time("09:00"), "09:30")
        self.assertEqual(default_end_time("09:30"), "10:00")
        self.assertIsNone(default_end_time("17:30"))
        self.assertIsNone(default_end_time("07:15"))

    def test_end_time_options_are_strictly_later(self) -> None:
        options = end_time_options("16:30")

        self.assertEqual(options, ["17:00", "17:30"])
        self.assertEqual(end_time_options("17:30"), [])

    def test_is_valid_slot(self) -> None:
        self.assertTrue(is_valid_slot("08:30"))
        self.assertFalse(is_valid_slot("08:15"))


class MonthGridTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = AppointmentStore.with_sample_data(TODAY)

    def test_weeks_start_on_sunday_and_cover_month(self) -> None:
        grid = month_grid(self.store, 2026, 10, today=TODAY)

        self.assertEqual(grid.title, "October 2026")
        self.assertEqual(grid.weekday_labels[0], "Sun")
        for week in grid.weeks:
            self.assertEqual(len(week), 7)
            self.assertEqual(week[0].day.weekday(), 6)
        in_month = [cell.day for week in grid.weeks for cell in week if cell.in_month]
        self.assertEqual(in_month[0], date(2026, 10, 1))
        self.assertEqual(in_month[-1], date(2026, 10, 31))

    def test_cells_show_counts_previews_and_overflow(self) -> None:
        busy_day = date(2026, 10, 23)
        for start, patient in (("08:00", "A"), ("09:00", "B"), ("10:00", "C")):
            self.store.add_appointment(_form(busy_day, start, patient))

        grid = month_grid(self.store, 2026, 10, today=TODAY)
        cells = {cell.day: cell for week in grid.weeks for cell in week}

        busy = cells[busy_day]
        self.assertEqual(busy.appointment_count, 3)
        self.assertEqual(busy.previews, ["08:00 - A", "09:00 - B"])
        self.assertEqual(busy.overflow, 1)
        self.assertEqual(cells[date(2026, 10, 20)].previews, ["09:00 - John Doe"])
        self.assertTrue(cells[TODAY].is_today)
        self.assertTrue(cells[TODAY].is_selected)
        self.assertFalse(cells[date(2026, 10, 20)].is_selected)

    def test_shift_month_wraps_years(self) -> None:
        self.assertEqual(shift_month(2026, 1, -1), (2025, 12))
        self.assertEqual(shift_month(2026, 12, 1), (2027, 1))
        self.assertEqual(shift_month(2026, 5, 14), (2027, 7))


class DayAgendaTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = AppointmentStore.with_sample_data(TODAY)

    def test_agenda_lists_doctor_and_status(self) -> None:
        agenda = day_agenda(self.store, date(2026, 10, 20))

        self.assertEqual(agenda.title, "Appointments for October 20, 2026")
        self.assertEqual(agenda.summary, "1 appointment scheduled")
        entry = agenda.entries[0]
        self.assertEqual(entry.time_range, "09:00 - 09:30")
        self.assertEqual(entry.doctor_name, "Dr. Jane Smith")
        self.assertEqual(entry.status_label, "Confirmed")
        self.assertEqual(entry.reason, "Annual checkup")

    def test_dangling_doctor_renders_unknown(self) -> None:
        day = date(2026, 10, 25)
        self.store.add_appointment(_form(day, "13:00", "Ghost", doctor_id="404"))
        self.store.add_appointment(_form(day, "14:00", "Casper"))

        agenda = day_agenda(self.store, day)

        self.assertEqual(agenda.summary, "2 appointments scheduled")
        self.assertEqual(agenda.entries[0].doctor_name, UNKNOWN_DOCTOR)
        self.assertEqual(agenda.entries[0].status_label, "Pending")

    def test_empty_day(self) -> None:
        agenda = day_agenda(self.store, TODAY)

        self.assertEqual(agenda.entries, [])
        self.assertEqual(agenda.summary, "No appointments scheduled for this day")
        self.assertEqual(agenda.to_dict()["date"], "2026-10-19")


if __name__ == "__main__":
    unittest.main()
