"""Parsing of the string forms accepted at the caller boundary.

Dates are ``YYYY-MM-DD``; instants are RFC 3339 (a trailing ``Z`` is accepted
and a missing offset means UTC). Right ascension and declination accept either
decimal values or sexagesimal text. Every parser raises ``InputError`` with a
message naming the offending value rather than guessing a correction.
"""

import datetime
import re

from skysched.errors import InputError

_RA_HMS = re.compile(r"^\s*(\d+)\s*[h:\s]\s*(\d+)\s*[m:\s]\s*(\d+(?:\.\d*)?)\s*s?\s*$")
_DEC_DMS = re.compile(
    r"""^\s*([+-]?)\s*(\d+)\s*[°d:\s]\s*(\d+)\s*['m:\s]\s*(\d+(?:\.\d*)?)\s*["s]?\s*$"""
)
# Python 3.10 only parses fractions of exactly 3 or 6 digits.
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def parse_date(value: str) -> datetime.date:
    try:
        return datetime.datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as e:
        raise InputError(f"Invalid date format: {value!r} (expected YYYY-MM-DD)") from e


def parse_instant(value: str | None) -> datetime.datetime | None:
    if value is None:
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text)
    try:
        dt = datetime.datetime.fromisoformat(text)
    except ValueError as e:
        raise InputError(f"Invalid datetime format: {value!r} (expected RFC 3339)") from e
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def parse_date_range(start: str, end: str) -> tuple[datetime.date, datetime.date]:
    start_date = parse_date(start)
    end_date = parse_date(end)
    check_date_range(start_date, end_date)
    return start_date, end_date


def check_date_range(start: datetime.date, end: datetime.date) -> None:
    if end < start:
        raise InputError(f"End date must be after start date ({start} > {end})")


def parse_ra(value: str) -> float:
    """Return right ascension in decimal hours."""
    text = value.strip()
    m = _RA_HMS.match(text)
    if m:
        hours, minutes, seconds = int(m.group(1)), int(m.group(2)), float(m.group(3))
        if minutes >= 60 or seconds >= 60:
            raise InputError(f"Invalid right ascension: {value!r}")
        ra = hours + minutes / 60.0 + seconds / 3600.0
    else:
        try:
            ra = float(text)
        except ValueError as e:
            raise InputError(f"Invalid right ascension: {value!r}") from e
    if not 0.0 <= ra < 24.0:
        raise InputError(f"Right ascension out of range [0, 24h): {value!r}")
    return ra


def parse_dec(value: str) -> float:
    """Return declination in decimal degrees."""
    text = value.strip()
    m = _DEC_DMS.match(text)
    if m:
        degrees, minutes, seconds = int(m.group(2)), int(m.group(3)), float(m.group(4))
        if minutes >= 60 or seconds >= 60:
            raise InputError(f"Invalid declination: {value!r}")
        dec = degrees + minutes / 60.0 + seconds / 3600.0
        if m.group(1) == "-":
            dec = -dec
    else:
        try:
            dec = float(text)
        except ValueError as e:
            raise InputError(f"Invalid declination: {value!r}") from e
    if not -90.0 <= dec <= 90.0:
        raise InputError(f"Declination out of range [-90, 90]: {value!r}")
    return dec
