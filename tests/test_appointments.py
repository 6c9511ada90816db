import unittest
from datetime import date, datetime, timedelta
from unittest.mock import patch

from booking import appointments
from scheduling import AppointmentStatus, AppointmentStore

TODAY = date(2026, 10, 19)


class BookingWorkflowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = AppointmentStore.with_sample_data(TODAY)
        self.notify_patcher = patch("booking.appointments.send_notification")
        self.mock_notify = self.notify_patcher.start()

    def tearDown(self) -> None:
        self.notify_patcher.stop()

    def _form(self, **overrides):
        values = {
            "doctor_id": "2",
            "patient_name": "Maria Lopez",
            "appointment_date": TODAY + timedelta(days=1),
            "start_time": "10:00",
        }
        values.update(overrides)
        return appointments.prepare_form(**values)

    def test_book_appointment_success(self) -> None:
        record = appointments.book_appointment(self.store, self._form())

        self.assertEqual(record.status, AppointmentStatus.PENDING)
        self.assertEqual(record.end_time, "10:30")
        self.assertEqual(len(self.store), 3)
        self.mock_notify.assert_called_once_with(
            "Appointment booked",
            "Appointment has been booked for October 20th, 2026 at 10:00",
        )

    def test_prepare_form_requires_doctor(self) -> None:
        with self.assertRaisesRegex(ValueError, "select a doctor"):
            self._form(doctor_id="  ")

    def test_prepare_form_requires_patient_name(self) -> None:
        with self.assertRaisesRegex(ValueError, "Patient name is required"):
            self._form(patient_name="")

    def test_prepare_form_keeps_explicit_end_time_and_strips_time_of_day(self) -> None:
        form = self._form(
            appointment_date=datetime(2026, 10, 21, 18, 45), end_time="11:30", reason=None
        )

        self.assertEqual(form.date, date(2026, 10, 21))
        self.assertEqual(form.end_time, "11:30")
        self.assertEqual(form.reason, "")

    def test_prepare_form_last_slot_has_no_following_slot(self) -> None:
        form = self._form(start_time="17:30")

        self.assertEqual(form.end_time, "17:30")

    def test_booking_does_not_check_doctor_exists(self) -> None:
        record = appointments.book_appointment(self.store, self._form(doctor_id="99"))

        self.assertEqual(record.doctor_id, "99")

    def test_update_appointment_keeps_status(self) -> None:
        form = self._form(doctor_id="3", start_time="11:00")

        record = appointments.update_appointment(self.store, "1", form)

        self.assertEqual(record.doctor_id, "3")
        self.assertEqual(record.status, AppointmentStatus.CONFIRMED)
        self.mock_notify.assert_called_once()
        self.assertEqual(self.mock_notify.call_args[0][0], "Appointment updated")

    def test_update_unknown_appointment_raises(self) -> None:
        with self.assertRaises(appointments.AppointmentNotFound):
            appointments.update_appointment(self.store, "999", self._form())

        self.mock_notify.assert_not_called()

    def test_cancel_appointment(self) -> None:
        appointments.cancel_appointment(self.store, "2")

        self.assertIsNone(self.store.get_appointment_by_id("2"))
        self.mock_notify.assert_called_once_with(
            "Appointment deleted", "The appointment has been cancelled and removed"
        )

    def test_cancel_nonexistent_appointment_raises_error(self) -> None:
        with self.assertRaises(LookupError):
            appointments.cancel_appointment(self.store, "999")

        self.assertEqual(len(self.store), 2)

    def test_load_form_for_existing_and_missing(self) -> None:
        form = appointments.load_form(self.store, "1")

        self.assertEqual(form.patient_name, "John Doe")
        self.assertEqual(form.start_time, "09:00")
        self.assertIsNone(appointments.load_form(self.store, "missing"))

    def test_blank_form_defaults(self) -> None:
        form = appointments.blank_form(TODAY)

        self.assertEqual(form.date, TODAY)
        self.assertEqual((form.start_time, form.end_time), ("09:00", "09:30"))
        self.assertEqual(form.doctor_id, "")


class FormatLongDateTests(unittest.TestCase):
    def test_ordinal_suffixes(self) -> None:
        self.assertEqual(appointments.format_long_date(date(2026, 1, 1)), "January 1st, 2026")
        self.assertEqual(appointments.format_long_date(date(2026, 1, 2)), "January 2nd, 2026")
        self.assertEqual(appointments.format_long_date(date(2026, 1, 3)), "January 3rd, 2026")
        self.assertEqual(appointments.format_long_date(date(2026, 1, 11)), "January 11th, 2026")
        self.assertEqual(appointments.format_long_date(date(2026, 1, 22)), "January 22nd, 2026")


if __name__ == "__main__":
    unittest.main()
