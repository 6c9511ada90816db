import io
import json
import unittest
from datetime import date, timedelta
from unittest.mock import MagicMock, patch

from connector import CalendarAPIError
from console import main


class ConsoleTests(unittest.TestCase):
    def test_agenda_from_seeded_store(self) -> None:
        tomorrow = date.today() + timedelta(days=1)

        result = main.run_agenda(tomorrow)

        self.assertEqual(result["appointments"][0]["patient_name"], "John Doe")

    def test_agenda_remote_uses_client(self) -> None:
        client = MagicMock()
        client.get_agenda.return_value = {"appointments": []}

        result = main.run_agenda(date(2026, 10, 20), remote=True, client=client)

        self.assertEqual(result, {"appointments": []})
        client.get_agenda.assert_called_once_with(date(2026, 10, 20))

    def test_slots_command_prints_end_options(self) -> None:
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            exit_code = main.main(["slots", "--start", "17:00"])

        self.assertEqual(exit_code, 0)
        self.assertEqual(json.loads(stdout.getvalue()), ["17:30"])

    def test_agenda_command_reports_api_failure(self) -> None:
        with patch("console.main.run_agenda", side_effect=CalendarAPIError("down")):
            exit_code = main.main(["agenda", "--remote", "--date", "2026-10-20"])

        self.assertEqual(exit_code, 1)

    def test_default_command_is_serve(self) -> None:
        args = main.parse_args([])

        self.assertEqual(args.command, "serve")

    def test_serve_builds_app(self) -> None:
        with patch("ui.dashboard.create_app") as create_app:
            main.main(["serve", "--port", "8080"])

        create_app.return_value.run.assert_called_once_with(host="127.0.0.1", port=8080, debug=False)


if __name__ == "__main__":
    unittest.main()
