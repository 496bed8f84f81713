import datetime
import math

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0


def _as_utc(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def to_julian_day(dt: datetime.datetime) -> float:
    dt = _as_utc(dt)
    year = dt.year
    month = dt.month
    seconds = dt.second + dt.microsecond / 1e6
    day = dt.day + (dt.hour + (dt.minute + seconds / 60.0) / 60.0) / 24.0
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5
    return jd


def from_julian_day(jd: float) -> datetime.datetime:
    z = math.floor(jd + 0.5)
    f = jd + 0.5 - z
    if z < 2299161:
        a = z
    else:
        alpha = math.floor((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - math.floor(alpha / 4)
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)

    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    midnight = datetime.datetime(int(year), int(month), int(day), tzinfo=datetime.timezone.utc)
    # whole microseconds only
    return midnight + datetime.timedelta(microseconds=round(f * 86400e6))


def wrap_degrees(angle: float) -> float:
    wrapped = angle % 360.0
    # -1e-20 % 360.0 == 360.0 in floating point
    return 0.0 if wrapped >= 360.0 else wrapped


def julian_centuries(jd: float) -> float:
    return (jd - J2000) / DAYS_PER_CENTURY


def greenwich_sidereal_time(jd: float) -> float:
    """Greenwich mean sidereal time in degrees, wrapped to [0, 360)."""
    t = julian_centuries(jd)
    gmst = (
        280.46061837
        + 360.98564736629 * (jd - J2000)
        + 0.000387933 * t * t
        - t * t * t / 38710000.0
    )
    return wrap_degrees(gmst)


def local_sidereal_time(jd: float, longitude_deg: float) -> float:
    return wrap_degrees(greenwich_sidereal_time(jd) + longitude_deg)


def day_start_utc(date: datetime.date) -> datetime.datetime:
    return datetime.datetime(date.year, date.month, date.day, tzinfo=datetime.timezone.utc)
