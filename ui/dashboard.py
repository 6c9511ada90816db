"""Calendar web application for the clinic appointment store.

This module exposes a small Flask application with two HTML pages (a month
calendar and a day agenda) and a JSON API over the appointment store. The
store is handed to :func:`create_app`; every request reads the live
collections so pages always reflect the latest mutations.
"""
from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime
import os
from typing import Any, Mapping, Optional, Tuple

from flask import Flask, Response, jsonify, render_template_string, request

from booking import (
    AppointmentNotFound,
    book_appointment,
    cancel_appointment,
    prepare_form,
    update_appointment,
)
from scheduling import TIME_SLOTS, AppointmentStatus, AppointmentStore
from ui.views import day_agenda, month_grid, shift_month

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"


def parse_iso_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_month(value: str | None) -> Tuple[int, int] | None:
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, MONTH_FORMAT)
    except ValueError:
        return None
    # The first and last months have no neighbours inside the date range.
    if not (1, 1) < (parsed.year, parsed.month) < (9999, 12):
        return None
    return parsed.year, parsed.month


def _optional_text(payload: Mapping[str, Any], field: str) -> str | None:
    value = payload.get(field)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    return value


def _form_from_payload(payload: Mapping[str, Any]):
    return prepare_form(
        doctor_id=str(payload.get("doctor_id") or ""),
        patient_name=str(payload.get("patient_name") or ""),
        appointment_date=payload.get("date"),
        start_time=_optional_text(payload, "start_time") or "",
        end_time=_optional_text(payload, "end_time"),
        reason=_optional_text(payload, "reason"),
    )


def _json_payload() -> Mapping[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, Mapping):
        raise ValueError("Request body must be a JSON object")
    return payload


BASE_HEAD = """
<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\">
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">
    <title>Appointment Dashboard</title>
    <link
      href=\"https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css\"
      rel=\"stylesheet\"
      integrity=\"sha384-QWTKZyjpPEjISv5WaRU9OFeRpok6YctnYmDr5pNlyT2bRjXh0JMhjY6hW+ALEwIH\"
      crossorigin=\"anonymous\"
    >
  </head>
  <body class=\"bg-light\">
    <nav class=\"navbar navbar-expand-lg navbar-dark bg-primary\">
      <div class=\"container-fluid\">
        <a class=\"navbar-brand\" href=\"/calendar\">Clinic Calendar</a>
      </div>
    </nav>
"""

calendar_template = BASE_HEAD + """
    <main class=\"container my-4\">
      <h1 class=\"h3\">Appointment Dashboard</h1>
      <p class=\"text-muted\">Manage your medical appointments with ease.</p>
      <div class=\"d-flex align-items-center gap-2 mb-3\">
        <a class=\"btn btn-outline-secondary btn-sm\" href=\"/calendar?month={{ prev_month }}\" aria-label=\"Previous month\">&lsaquo;</a>
        <span class=\"h5 mb-0\">{{ grid.title }}</span>
        <a class=\"btn btn-outline-secondary btn-sm\" href=\"/calendar?month={{ next_month }}\" aria-label=\"Next month\">&rsaquo;</a>
      </div>
      <table class=\"table table-bordered bg-white\">
        <thead>
          <tr>
            {% for label in grid.weekday_labels %}<th scope=\"col\" class=\"text-center text-muted\">{{ label }}</th>{% endfor %}
          </tr>
        </thead>
        <tbody>
          {% for week in grid.weeks %}
            <tr>
              {% for cell in week %}
                <td class=\"{% if cell.is_today %}table-primary{% endif %} {% if not cell.in_month %}text-muted{% endif %} {% if cell.is_selected %}border-primary border-2{% endif %}\">
                  <a href=\"/day?date={{ cell.day.isoformat() }}\" class=\"text-decoration-none\">{{ cell.day.day }}</a>
                  {% if cell.appointment_count %}
                    <span class=\"badge rounded-pill text-bg-info\">{{ cell.appointment_count }}</span>
                  {% endif %}
                  {% for preview in cell.previews %}
                    <div class=\"small text-truncate\">{{ preview }}</div>
                  {% endfor %}
                  {% if cell.overflow %}
                    <div class=\"small text-muted\">+{{ cell.overflow }} more</div>
                  {% endif %}
                </td>
              {% endfor %}
            </tr>
          {% endfor %}
        </tbody>
      </table>
    </main>
  </body>
</html>
"""

day_template = BASE_HEAD + """
    <main class=\"container my-4\">
      <div class=\"card shadow-sm\">
        <div class=\"card-header d-flex justify-content-between align-items-center\">
          <span>{{ agenda.title }}</span>
          <a class=\"btn btn-outline-secondary btn-sm\" href=\"/calendar?month={{ month }}\">Back to Month View</a>
        </div>
        <div class=\"card-body\">
          <p class=\"text-muted\">{{ agenda.summary }}</p>
          {% for entry in agenda.entries %}
            <div class=\"border rounded p-3 mb-2\">
              <div class=\"d-flex justify-content-between\">
                <div>
                  <div class=\"fw-semibold\">{{ entry.time_range }}</div>
                  <div>{{ entry.patient_name }}</div>
                  <div class=\"small text-muted\">With {{ entry.doctor_name }}</div>
                </div>
                <span class=\"badge {{ status_classes.get(entry.status, 'text-bg-danger') }} align-self-start\">{{ entry.status_label }}</span>
              </div>
              {% if entry.reason %}
                <p class=\"small mt-2 mb-0\"><span class=\"fw-semibold\">Reason:</span> {{ entry.reason }}</p>
              {% endif %}
            </div>
          {% endfor %}
        </div>
      </div>
    </main>
  </body>
</html>
"""

STATUS_CLASSES = {
    AppointmentStatus.CONFIRMED.value: "text-bg-success",
    AppointmentStatus.PENDING.value: "text-bg-warning",
}


def create_app(store: Optional[AppointmentStore] = None) -> Flask:
    """Build the calendar application around ``store``."""

    store = store if store is not None else AppointmentStore.with_sample_data()
    app = Flask(__name__)
    app.extensions["appointment_store"] = store

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError) -> Tuple[Response, int]:
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(AppointmentNotFound)
    def not_found(exc: AppointmentNotFound) -> Tuple[Response, int]:
        return jsonify({"error": str(exc)}), 404

    @app.route("/", methods=["GET"])
    @app.route("/calendar", methods=["GET"])
    def calendar_page() -> str:
        today = date.today()
        year, month = parse_month(request.args.get("month")) or (today.year, today.month)
        grid = month_grid(store, year, month, today=today)
        prev_year, prev_month = shift_month(year, month, -1)
        next_year, next_month = shift_month(year, month, 1)
        return render_template_string(
            calendar_template,
            grid=grid,
            prev_month=f"{prev_year:04d}-{prev_month:02d}",
            next_month=f"{next_year:04d}-{next_month:02d}",
        )

    @app.route("/day", methods=["GET"])
    def day_page() -> str:
        target = parse_iso_date(request.args.get("date")) or store.selected_date or date.today()
        store.set_selected_date(target)
        return render_template_string(
            day_template,
            agenda=day_agenda(store, target),
            month=target.strftime(MONTH_FORMAT),
            status_classes=STATUS_CLASSES,
        )

    @app.route("/api/doctors", methods=["GET"])
    def list_doctors() -> Response:
        return jsonify([doctor.to_dict() for doctor in store.doctors])

    @app.route("/api/slots", methods=["GET"])
    def list_slots() -> Response:
        return jsonify(TIME_SLOTS)

    @app.route("/api/appointments", methods=["GET"])
    def list_appointments() -> Response:
        raw_date = request.args.get("date")
        doctor_id = request.args.get("doctor_id")
        if raw_date:
            target = parse_iso_date(raw_date)
            if target is None:
                raise ValueError(f"date must use the {DATE_FORMAT} format")
            records = store.get_appointments_by_date(target)
            if doctor_id:
                records = [record for record in records if record.doctor_id == doctor_id]
        elif doctor_id:
            records = store.get_appointments_by_doctor(doctor_id)
        else:
            records = store.appointments
        return jsonify([record.to_dict() for record in records])

    @app.route("/api/appointments/counts", methods=["GET"])
    def appointment_counts() -> Response:
        today = date.today()
        year, month = parse_month(request.args.get("month")) or (today.year, today.month)
        last_day = monthrange(year, month)[1]
        counts = store.count_by_date(date(year, month, 1), date(year, month, last_day))
        return jsonify({day.isoformat(): size for day, size in counts.items()})

    @app.route("/api/agenda", methods=["GET"])
    def agenda() -> Response:
        target = parse_iso_date(request.args.get("date"))
        if target is None:
            raise ValueError(f"date must use the {DATE_FORMAT} format")
        return jsonify(day_agenda(store, target).to_dict())

    @app.route("/api/appointments/<appointment_id>", methods=["GET"])
    def get_appointment(appointment_id: str) -> Response:
        record = store.get_appointment_by_id(appointment_id)
        if record is None:
            raise AppointmentNotFound(appointment_id)
        return jsonify(record.to_dict())

    @app.route("/api/appointments", methods=["POST"])
    def create_appointment() -> Tuple[Response, int]:
        record = book_appointment(store, _form_from_payload(_json_payload()))
        return jsonify(record.to_dict()), 201

    @app.route("/api/appointments/<appointment_id>", methods=["PUT"])
    def edit_appointment(appointment_id: str) -> Response:
        record = update_appointment(store, appointment_id, _form_from_payload(_json_payload()))
        return jsonify(record.to_dict())

    @app.route("/api/appointments/<appointment_id>/status", methods=["PATCH"])
    def change_status(appointment_id: str) -> Response:
        if store.get_appointment_by_id(appointment_id) is None:
            raise AppointmentNotFound(appointment_id)
        status = AppointmentStatus(_json_payload().get("status"))
        if not store.update_status(appointment_id, status):
            raise AppointmentNotFound(appointment_id)
        return jsonify(store.get_appointment_by_id(appointment_id).to_dict())

    @app.route("/api/appointments/<appointment_id>", methods=["DELETE"])
    def delete_appointment(appointment_id: str) -> Tuple[str, int]:
        cancel_appointment(store, appointment_id)
        return "", 204

    return app


if __name__ == "__main__":
    create_app().run(
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "5000")),
        debug=False,
    )
