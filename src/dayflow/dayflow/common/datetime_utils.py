from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DATE_FORMAT, DATETIME_FORMAT, TIME_FORMAT


def parse_iso_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_time(value: str) -> time:
    return datetime.strptime(value, TIME_FORMAT).time()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.strptime(value, DATETIME_FORMAT)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_time(value: Optional[time]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value is not None else None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(DATETIME_FORMAT) if value is not None else None


def now_local() -> datetime:
    """Local wall-clock time at whole-second precision, as stored in the ledgers."""
    return datetime.now().replace(microsecond=0)
