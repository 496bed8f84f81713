"""Low-precision analytic Sun and Moon ephemeris.

Accuracy is of the order of a few arcminutes for the Sun and a fraction of a
degree for the Moon, which is plenty for twilight and Moon-avoidance decisions.
"""

import datetime
import math

from .timescale import J2000, julian_centuries, to_julian_day, wrap_degrees
from .transform import equatorial_to_horizontal
from .types import CelestialPosition, MoonPhaseInfo, ObserverLocation

SYNODIC_MONTH = 29.530588853
# A new moon (2000-01-06 14:24 UTC) used as the phase epoch.
_REFERENCE_NEW_MOON_JD = 2451550.1
AU_KM = 149_597_870.7

_PHASE_NAMES = (
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
)


def _ra_hours(ra_rad: float) -> float:
    return (math.degrees(ra_rad) / 15.0) % 24.0


def sun_position(jd: float) -> tuple[float, float]:
    """Return the Sun's (RA hours, Dec degrees)."""
    n = jd - J2000
    l = wrap_degrees(280.460 + 0.9856474 * n)
    g = math.radians(wrap_degrees(357.528 + 0.9856003 * n))
    lam = math.radians(l + 1.915 * math.sin(g) + 0.020 * math.sin(2 * g))
    eps = math.radians(23.439 - 0.0000004 * n)
    ra = math.atan2(math.cos(eps) * math.sin(lam), math.cos(lam))
    dec = math.asin(math.sin(eps) * math.sin(lam))
    return _ra_hours(ra), math.degrees(dec)


def sun_altitude(location: ObserverLocation, jd: float) -> float:
    ra, dec = sun_position(jd)
    alt, _ = equatorial_to_horizontal(ra, dec, location.latitude_deg, location.longitude_deg, jd)
    return alt


def moon_position(jd: float) -> tuple[float, float, float]:
    """Return the Moon's (RA hours, Dec degrees, distance km)."""
    t = julian_centuries(jd)
    l0 = wrap_degrees(218.3164477 + 481267.88123421 * t)
    m = math.radians(wrap_degrees(134.9633964 + 477198.8675055 * t))
    d = math.radians(wrap_degrees(297.8501921 + 445267.1114034 * t))
    f = math.radians(wrap_degrees(93.272095 + 483202.0175233 * t))

    dl = (
        6.289 * math.sin(m)
        + 1.274 * math.sin(2 * d - m)
        + 0.658 * math.sin(2 * d)
        + 0.214 * math.sin(2 * m)
        - 0.186 * math.sin(d)
    )
    lam = math.radians(l0 + dl)
    beta = math.radians(5.128 * math.sin(f))
    eps = math.radians(23.439)

    ra = math.atan2(
        math.cos(eps) * math.sin(lam) * math.cos(beta) - math.sin(eps) * math.sin(beta),
        math.cos(lam) * math.cos(beta),
    )
    sin_dec = math.sin(eps) * math.sin(lam) * math.cos(beta) + math.cos(eps) * math.sin(beta)
    dec = math.asin(max(-1.0, min(1.0, sin_dec)))
    distance_km = 385001.0 - 20905.0 * math.cos(m)
    return _ra_hours(ra), math.degrees(dec), distance_km


def moon_phase(jd: float) -> float:
    """Fraction of the synodic month elapsed since new moon, in [0, 1)."""
    days_since_new = (jd - _REFERENCE_NEW_MOON_JD) % SYNODIC_MONTH
    return days_since_new / SYNODIC_MONTH


def moon_illumination(jd: float) -> float:
    """Illuminated fraction of the disc as a percentage."""
    angle = moon_phase(jd) * 2.0 * math.pi
    return (1.0 - math.cos(angle)) / 2.0 * 100.0


def moon_phase_name(phase: float) -> str:
    # half-up rounding into one of eight buckets
    return _PHASE_NAMES[math.floor(phase * 8.0 + 0.5) % 8]


def moon_phase_info(dt: datetime.datetime) -> MoonPhaseInfo:
    jd = to_julian_day(dt)
    phase = moon_phase(jd)
    days_to_new = (1.0 - phase) * SYNODIC_MONTH
    if phase < 0.5:
        days_to_full = (0.5 - phase) * SYNODIC_MONTH
    else:
        days_to_full = (1.5 - phase) * SYNODIC_MONTH
    return MoonPhaseInfo(
        phase=phase,
        illumination=moon_illumination(jd),
        phase_name=moon_phase_name(phase),
        age_days=phase * SYNODIC_MONTH,
        next_new_moon=dt + datetime.timedelta(days=days_to_new),
        next_full_moon=dt + datetime.timedelta(days=days_to_full),
    )


def sun_position_at(location: ObserverLocation, dt: datetime.datetime) -> CelestialPosition:
    jd = to_julian_day(dt)
    ra, dec = sun_position(jd)
    alt, az = equatorial_to_horizontal(ra, dec, location.latitude_deg, location.longitude_deg, jd)
    return CelestialPosition(
        altitude=alt,
        azimuth=az,
        ra_hours=ra,
        dec_degrees=dec,
        distance_km=AU_KM,
    )


def moon_position_at(location: ObserverLocation, dt: datetime.datetime) -> CelestialPosition:
    jd = to_julian_day(dt)
    ra, dec, distance_km = moon_position(jd)
    alt, az = equatorial_to_horizontal(ra, dec, location.latitude_deg, location.longitude_deg, jd)
    return CelestialPosition(
        altitude=alt,
        azimuth=az,
        ra_hours=ra,
        dec_degrees=dec,
        distance_km=distance_km,
    )
