import datetime
import logging

from skysched.util.parse import check_date_range

from .ephemeris import sun_altitude
from .timescale import from_julian_day, to_julian_day
from .types import ObserverLocation, TwilightTimes

logger = logging.getLogger(__name__)

HORIZON_DEG = -0.833
CIVIL_DEG = -6.0
NAUTICAL_DEG = -12.0
ASTRONOMICAL_DEG = -18.0

_MAX_ITERATIONS = 50
_TOLERANCE_DEG = 0.001


def _local_noon_jd(location: ObserverLocation, date: datetime.date) -> float:
    noon_utc = datetime.datetime(date.year, date.month, date.day, 12, tzinfo=datetime.timezone.utc)
    return to_julian_day(noon_utc) - location.longitude_deg / 360.0


def _find_sun_crossing(
    location: ObserverLocation,
    noon_jd: float,
    target_deg: float,
    rising: bool,
) -> datetime.datetime | None:
    """Bisect for the instant the Sun crosses ``target_deg`` on one side of noon.

    Returns None when the half-day window does not bracket the threshold in the
    requested direction.
    """
    if rising:
        low, high = noon_jd - 0.5, noon_jd
    else:
        low, high = noon_jd, noon_jd + 0.5

    alt_low = sun_altitude(location, low)
    alt_high = sun_altitude(location, high)
    if rising:
        if alt_low > target_deg or alt_high < target_deg:
            return None
    elif alt_low < target_deg or alt_high > target_deg:
        return None

    for _ in range(_MAX_ITERATIONS):
        mid = (low + high) / 2.0
        alt = sun_altitude(location, mid)
        if abs(alt - target_deg) < _TOLERANCE_DEG:
            return from_julian_day(mid)
        # Sun is below the threshold before a rising crossing and above it before a setting one.
        if (alt < target_deg) == rising:
            low = mid
        else:
            high = mid
    return from_julian_day((low + high) / 2.0)


def compute_twilight(location: ObserverLocation, date: datetime.date) -> TwilightTimes:
    noon_jd = _local_noon_jd(location, date)

    def crossing(target_deg: float, rising: bool) -> datetime.datetime | None:
        return _find_sun_crossing(location, noon_jd, target_deg, rising)

    midnight_alt = sun_altitude(location, noon_jd - 0.5)
    noon_alt = sun_altitude(location, noon_jd)

    return TwilightTimes(
        date=date.strftime("%Y-%m-%d"),
        sunrise=crossing(HORIZON_DEG, True),
        sunset=crossing(HORIZON_DEG, False),
        civil_dawn=crossing(CIVIL_DEG, True),
        civil_dusk=crossing(CIVIL_DEG, False),
        nautical_dawn=crossing(NAUTICAL_DEG, True),
        nautical_dusk=crossing(NAUTICAL_DEG, False),
        astronomical_dawn=crossing(ASTRONOMICAL_DEG, True),
        astronomical_dusk=crossing(ASTRONOMICAL_DEG, False),
        is_polar_day=midnight_alt > HORIZON_DEG,
        is_polar_night=noon_alt < HORIZON_DEG,
    )


def twilight_range(
    location: ObserverLocation,
    start_date: datetime.date,
    end_date: datetime.date,
) -> list[TwilightTimes]:
    check_date_range(start_date, end_date)
    days = (end_date - start_date).days + 1
    logger.debug("computing twilight for %d days from %s", days, start_date)
    return [
        compute_twilight(location, start_date + datetime.timedelta(days=offset))
        for offset in range(days)
    ]


def dark_window(
    location: ObserverLocation,
    date: datetime.date,
) -> tuple[datetime.datetime, datetime.datetime] | None:
    """Astronomical darkness from dusk on ``date`` to dawn on the following day."""
    dusk = compute_twilight(location, date).astronomical_dusk
    dawn = compute_twilight(location, date + datetime.timedelta(days=1)).astronomical_dawn
    if dusk is None or dawn is None:
        return None
    return dusk, dawn
