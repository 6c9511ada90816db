"""HTTP client for the clinic calendar JSON API.

The client wraps a :class:`requests.Session` configured with retries and
turns transport failures and unexpected responses into
:class:`CalendarAPIError`. Lookups of unknown appointments return ``None``
rather than raising, mirroring the store's own lookup semantics.
"""
from __future__ import annotations

import logging
import os
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

__all__ = ["CalendarAPIError", "CalendarAPIClient"]


logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 0.5

DEFAULT_BASE_URL = os.getenv("CLINIC_CALENDAR_API_URL", "http://127.0.0.1:5000")


class CalendarAPIError(RuntimeError):
    """Raised when the calendar API cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CalendarAPIClient:
    """Client for the appointment endpoints served by ``ui.dashboard``."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url must be provided")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or self._build_session(
            max_retries=max_retries, backoff_factor=backoff_factor
        )

    def _build_session(self, *, max_retries: int, backoff_factor: float) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            read=max_retries,
            connect=max_retries,
            status=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET", "PUT", "DELETE", "OPTIONS"),
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_payload: Optional[Dict[str, Any]] = None,
        expected_status: Union[int, Tuple[int, ...]] = (200,),
    ) -> Response:
        if isinstance(expected_status, int):
            expected_status = (expected_status,)

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self._session.request(
                method=method.upper(),
                url=url,
                params=params,
                json=json_payload,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Request to calendar API failed: %s", exc)
            raise CalendarAPIError("Failed to execute request to calendar API") from exc

        if response.status_code not in expected_status:
            self._log_error_response(response)
            raise CalendarAPIError(
                f"Calendar API responded with unexpected status {response.status_code}: "
                f"{self._error_message(response)}",
                status_code=response.status_code,
            )

        return response

    @staticmethod
    def _error_message(response: Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text[:2048]
        if isinstance(payload, dict) and "error" in payload:
            return str(payload["error"])
        return str(payload)

    @staticmethod
    def _log_error_response(response: Response) -> None:
        logger.error(
            "Calendar API error response: status=%s body=%s",
            response.status_code,
            response.text[:2048],
        )

    @staticmethod
    def _form_payload(
        doctor_id: str,
        patient_name: str,
        appointment_date: date,
        start_time: str,
        end_time: Optional[str],
        reason: str,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "doctor_id": doctor_id,
            "patient_name": patient_name,
            "date": appointment_date.isoformat(),
            "start_time": start_time,
            "reason": reason,
        }
        if end_time:
            payload["end_time"] = end_time
        return payload

    def list_doctors(self) -> List[Dict[str, Any]]:
        return self._request("GET", "api/doctors").json()

    def list_appointments(
        self, appointment_date: Optional[date] = None, doctor_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if appointment_date is not None:
            params["date"] = appointment_date.isoformat()
        if doctor_id:
            params["doctor_id"] = doctor_id
        return self._request("GET", "api/appointments", params=params or None).json()

    def get_agenda(self, appointment_date: date) -> Dict[str, Any]:
        response = self._request(
            "GET", "api/agenda", params={"date": appointment_date.isoformat()}
        )
        return response.json()

    def get_appointment(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve an appointment, or ``None`` when it does not exist."""

        if not appointment_id:
            raise ValueError("appointment_id must be provided")
        response = self._request(
            "GET", f"api/appointments/{appointment_id}", expected_status=(200, 404)
        )
        if response.status_code == 404:
            return None
        return response.json()

    def book_appointment(
        self,
        doctor_id: str,
        patient_name: str,
        appointment_date: date,
        start_time: str,
        end_time: Optional[str] = None,
        reason: str = "",
    ) -> Dict[str, Any]:
        payload = self._form_payload(
            doctor_id, patient_name, appointment_date, start_time, end_time, reason
        )
        response = self._request(
            "POST", "api/appointments", json_payload=payload, expected_status=201
        )
        return response.json()

    def update_appointment(
        self,
        appointment_id: str,
        doctor_id: str,
        patient_name: str,
        appointment_date: date,
        start_time: str,
        end_time: Optional[str] = None,
        reason: str = "",
    ) -> Dict[str, Any]:
        if not appointment_id:
            raise ValueError("appointment_id must be provided")
        payload = self._form_payload(
            doctor_id, patient_name, appointment_date, start_time, end_time, reason
        )
        response = self._request(
            "PUT", f"api/appointments/{appointment_id}", json_payload=payload
        )
        return response.json()

    def set_status(self, appointment_id: str, status: str) -> Dict[str, Any]:
        if not appointment_id:
            raise ValueError("appointment_id must be provided")
        response = self._request(
            "PATCH",
            f"api/appointments/{appointment_id}/status",
            json_payload={"status": status},
        )
        return response.json()

    def delete_appointment(self, appointment_id: str) -> None:
        if not appointment_id:
            raise ValueError("appointment_id must be provided")
        self._request("DELETE", f"api/appointments/{appointment_id}", expected_status=204)
