import datetime
import logging

from skysched.util.parse import check_date_range

from .timescale import day_start_utc, from_julian_day, to_julian_day
from .transform import equatorial_to_horizontal
from .types import Coordinates, ObserverLocation, VisibilityWindow

logger = logging.getLogger(__name__)

# 10-minute grid over one UTC day, both midnights included.
SAMPLES_PER_DAY = 144


def compute_visibility_window(
    coords: Coordinates,
    location: ObserverLocation,
    date: datetime.date,
    min_altitude: float,
) -> VisibilityWindow:
    """Sample the target across ``date`` (UTC) and return its first visible window.

    The window opens at the first sample at or above ``min_altitude`` and closes at
    the first sample that drops below it afterwards. A target still up at the last
    sample is treated as visible until the day boundary. Later re-risings on the
    same day are ignored.
    """
    ra = coords.ra_to_decimal()
    dec = coords.dec_to_decimal()
    jd_start = to_julian_day(day_start_utc(date))

    start_time = None
    end_time = None
    max_altitude = -90.0
    max_altitude_time = from_julian_day(jd_start)
    was_visible = False

    for i in range(SAMPLES_PER_DAY + 1):
        jd = jd_start + i / SAMPLES_PER_DAY
        alt, _ = equatorial_to_horizontal(ra, dec, location.latitude_deg, location.longitude_deg, jd)
        visible = alt >= min_altitude

        if alt > max_altitude:
            max_altitude = alt
            max_altitude_time = from_julian_day(jd)
        if visible and not was_visible and start_time is None:
            start_time = from_julian_day(jd)
        if not visible and was_visible and end_time is None:
            end_time = from_julian_day(jd)
        was_visible = visible

    if was_visible and end_time is None:
        end_time = from_julian_day(jd_start + 1.0)

    if start_time is not None and end_time is not None:
        duration_hours = (end_time - start_time).total_seconds() / 3600.0
    else:
        duration_hours = 0.0

    midnight = from_julian_day(jd_start)
    return VisibilityWindow(
        start_time=start_time or midnight,
        end_time=end_time or midnight,
        max_altitude=max_altitude,
        max_altitude_time=max_altitude_time,
        duration_hours=duration_hours,
        is_visible=start_time is not None,
    )


def visibility_range(
    coords: Coordinates,
    location: ObserverLocation,
    start_date: datetime.date,
    end_date: datetime.date,
    min_altitude: float,
) -> list[VisibilityWindow]:
    check_date_range(start_date, end_date)
    days = (end_date - start_date).days + 1
    logger.debug("sampling visibility for %d days from %s", days, start_date)
    return [
        compute_visibility_window(coords, location, start_date + datetime.timedelta(days=offset), min_altitude)
        for offset in range(days)
    ]


def altitude_curve(
    coords: Coordinates,
    location: ObserverLocation,
    date: datetime.date,
    interval_minutes: int = 10,
) -> list[tuple[datetime.datetime, float, float]]:
    """(instant, altitude, azimuth) samples from UTC midnight to the next midnight."""
    step = max(1, int(interval_minutes))
    ra = coords.ra_to_decimal()
    dec = coords.dec_to_decimal()
    start = day_start_utc(date)
    points = []
    for minutes in range(0, 24 * 60 + 1, step):
        instant = start + datetime.timedelta(minutes=minutes)
        alt, az = equatorial_to_horizontal(
            ra, dec, location.latitude_deg, location.longitude_deg, to_julian_day(instant)
        )
        points.append((instant, alt, az))
    return points


def is_visible_at(
    coords: Coordinates,
    location: ObserverLocation,
    instant: datetime.datetime,
    min_altitude: float,
) -> bool:
    alt, _ = equatorial_to_horizontal(
        coords.ra_to_decimal(),
        coords.dec_to_decimal(),
        location.latitude_deg,
        location.longitude_deg,
        to_julian_day(instant),
    )
    return alt >= min_altitude
