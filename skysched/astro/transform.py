import math

from .timescale import local_sidereal_time
from .types import Coordinates

# Floor for the zenith-distance sine so the azimuth formula stays finite at the zenith.
_MIN_ZENITH_SINE = 1e-4


def equatorial_to_horizontal(
    ra_hours: float,
    dec_deg: float,
    lat_deg: float,
    lon_deg: float,
    jd: float,
) -> tuple[float, float]:
    """Return (altitude, azimuth) in degrees; azimuth is measured from north through east."""
    lst_deg = local_sidereal_time(jd, lon_deg)
    ha = math.radians(lst_deg - ra_hours * 15.0)
    dec = math.radians(dec_deg)
    lat = math.radians(lat_deg)

    sin_alt = math.sin(lat) * math.sin(dec) + math.cos(lat) * math.cos(dec) * math.cos(ha)
    sin_alt = max(-1.0, min(1.0, sin_alt))
    altitude = math.degrees(math.asin(sin_alt))

    sin_zenith = max(math.sin(math.acos(sin_alt)), _MIN_ZENITH_SINE)
    cos_az = (math.sin(dec) - math.sin(lat) * sin_alt) / (math.cos(lat) * sin_zenith)
    azimuth = math.degrees(math.acos(max(-1.0, min(1.0, cos_az))))

    # West of the meridian.
    if math.sin(ha) > 0.0:
        azimuth = 360.0 - azimuth

    return altitude, azimuth


def hour_angle(ra_hours: float, lon_deg: float, jd: float) -> float:
    """Hour angle in degrees, wrapped to (-180, 180]. Positive west of the meridian."""
    ha = (local_sidereal_time(jd, lon_deg) - ra_hours * 15.0) % 360.0
    if ha > 180.0:
        ha -= 360.0
    return ha


def air_mass(altitude_deg: float) -> float | None:
    """Kasten-Young air mass; None at or below the horizon."""
    if altitude_deg <= 0.0:
        return None
    zenith_deg = 90.0 - altitude_deg
    return 1.0 / (
        math.cos(math.radians(zenith_deg)) + 0.50572 * (96.07995 - zenith_deg) ** -1.6364
    )


def angular_separation_deg(
    ra1_hours: float,
    dec1_deg: float,
    ra2_hours: float,
    dec2_deg: float,
) -> float:
    ra1 = math.radians(ra1_hours * 15.0)
    ra2 = math.radians(ra2_hours * 15.0)
    dec1 = math.radians(dec1_deg)
    dec2 = math.radians(dec2_deg)
    cos_sep = math.sin(dec1) * math.sin(dec2) + math.cos(dec1) * math.cos(dec2) * math.cos(ra1 - ra2)
    cos_sep = max(-1.0, min(1.0, cos_sep))
    return math.degrees(math.acos(cos_sep))


def angular_separation(a: Coordinates, b: Coordinates) -> float:
    return angular_separation_deg(
        a.ra_to_decimal(),
        a.dec_to_decimal(),
        b.ra_to_decimal(),
        b.dec_to_decimal(),
    )
