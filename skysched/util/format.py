import datetime
from typing import Tuple


def _wrap_hours(hours: float) -> float:
    return hours % 24.0


def _split_dms(angle_deg: float, precision: int) -> Tuple[int, int, int, float]:
    sign = -1 if angle_deg < 0 else 1
    a = abs(angle_deg)
    total_seconds = round(a * 3600.0, precision)
    deg = int(total_seconds // 3600)
    rem = total_seconds - deg * 3600
    minutes = int(rem // 60)
    seconds = rem - minutes * 60
    return sign, deg, minutes, seconds


def _split_hms(hours: float, precision: int) -> Tuple[int, int, float]:
    h = _wrap_hours(hours)
    total_seconds = round(h * 3600.0, precision) % (24.0 * 3600.0)
    hours_int = int(total_seconds // 3600)
    rem = total_seconds - hours_int * 3600
    minutes = int(rem // 60)
    seconds = rem - minutes * 60
    return hours_int, minutes, seconds


def _format_seconds(seconds: float, precision: int) -> str:
    width = 2 if precision <= 0 else 3 + precision
    return f"{seconds:0{width}.{max(precision, 0)}f}"


def hours_to_hms(hours: float, precision: int = 2) -> str:
    h, m, s = _split_hms(hours, precision)
    s_fmt = _format_seconds(s, precision)
    return f"{h:02d}:{m:02d}:{s_fmt}"


def deg_to_dms(deg: float, precision: int = 2) -> str:
    sign_val, d, m, s = _split_dms(deg, precision)
    sign = "-" if sign_val < 0 else "+"
    s_fmt = _format_seconds(s, precision)
    return f"{sign}{d:02d}:{m:02d}:{s_fmt}"


def format_duration(seconds: float) -> str:
    if seconds < 0:
        return "0s"
    total = int(seconds)
    days = total // 86400
    hours = (total % 86400) // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if days > 0:
        return f"{days}d {hours}h {minutes}m {secs}s"
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_local_time(
    dt: datetime.datetime | None,
    utc_offset_h: float = 0.0,
    short: bool = True,
) -> str:
    if dt is None:
        return "--"
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    tz = datetime.timezone(datetime.timedelta(hours=utc_offset_h))
    local = dt.astimezone(tz)
    if short:
        return local.strftime("%H:%M")
    return local.strftime("%Y-%m-%d %H:%M")
