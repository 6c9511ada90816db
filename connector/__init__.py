"""Connector interfaces for the clinic calendar API."""

from .calendar_client import CalendarAPIClient, CalendarAPIError

__all__ = ["CalendarAPIClient", "CalendarAPIError"]
