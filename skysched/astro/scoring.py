import datetime

from .ephemeris import moon_illumination, moon_position, sun_altitude
from .timescale import to_julian_day
from .transform import angular_separation_deg, equatorial_to_horizontal
from .types import Coordinates, ObservationQuality, ObserverLocation

LOW_ALTITUDE_ADVICE = "Target altitude is low, consider waiting for higher altitude"
TWILIGHT_ADVICE = "Not fully dark yet, wait for astronomical twilight"
BRIGHT_MOON_ADVICE = "Bright Moon nearby, consider imaging narrowband"


def _altitude_score(altitude: float) -> float:
    if altitude < 0.0:
        return 0.0
    if altitude < 30.0:
        return altitude / 30.0 * 20.0
    if altitude < 60.0:
        return 20.0 + (altitude - 30.0) / 30.0 * 20.0
    return 40.0


def _twilight_score(sun_alt: float) -> float:
    if sun_alt > 0.0:
        return 0.0
    if sun_alt > -6.0:
        return 5.0
    if sun_alt > -12.0:
        return 15.0
    if sun_alt > -18.0:
        return 25.0
    return 30.0


def _moon_score(illumination: float, separation: float) -> float:
    if illumination < 10.0:
        return 30.0
    if separation > 90.0:
        return 25.0
    if separation > 60.0:
        return 20.0 - illumination / 100.0 * 5.0
    if separation > 30.0:
        return 15.0 - illumination / 100.0 * 10.0
    return 5.0 - illumination / 100.0 * 5.0


def score_observation(
    coords: Coordinates,
    location: ObserverLocation,
    instant: datetime.datetime,
) -> ObservationQuality:
    """Score an observation out of 100: altitude (40), sky darkness (30) and Moon (30)."""
    jd = to_julian_day(instant)
    ra = coords.ra_to_decimal()
    dec = coords.dec_to_decimal()

    target_alt, _ = equatorial_to_horizontal(ra, dec, location.latitude_deg, location.longitude_deg, jd)
    sun_alt = sun_altitude(location, jd)
    moon_ra, moon_dec, _ = moon_position(jd)
    illumination = moon_illumination(jd)
    separation = angular_separation_deg(ra, dec, moon_ra, moon_dec)

    recommendations = []
    if target_alt < 30.0:
        recommendations.append(LOW_ALTITUDE_ADVICE)
    if sun_alt > -18.0:
        recommendations.append(TWILIGHT_ADVICE)
    if illumination > 50.0 and separation < 60.0:
        recommendations.append(BRIGHT_MOON_ADVICE)

    altitude_score = _altitude_score(target_alt)
    twilight_score = _twilight_score(sun_alt)
    moon_score = _moon_score(illumination, separation)
    return ObservationQuality(
        score=altitude_score + twilight_score + moon_score,
        altitude_score=altitude_score,
        twilight_score=twilight_score,
        moon_score=moon_score,
        recommendations=recommendations,
    )
