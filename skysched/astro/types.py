from dataclasses import dataclass, field
import datetime
import math

from skysched.errors import InputError


@dataclass(frozen=True)
class ObserverLocation:
    latitude_deg: float
    longitude_deg: float
    elevation_m: float = 0.0
    utc_offset_h: float = 0.0
    name: str | None = None

    def __post_init__(self):
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise InputError(f"Latitude out of range [-90, 90]: {self.latitude_deg}")


@dataclass(frozen=True)
class Coordinates:
    """Equatorial coordinates in sexagesimal parts.

    Declination parts are unsigned; ``negative_dec`` carries the sign so that
    values such as -00° 30' survive the split.
    """

    ra_hours: int = 0
    ra_minutes: int = 0
    ra_seconds: float = 0.0
    dec_degrees: int = 0
    dec_minutes: int = 0
    dec_seconds: float = 0.0
    negative_dec: bool = False

    def ra_to_decimal(self) -> float:
        return self.ra_hours + self.ra_minutes / 60.0 + self.ra_seconds / 3600.0

    def ra_to_degrees(self) -> float:
        return self.ra_to_decimal() * 15.0

    def dec_to_decimal(self) -> float:
        value = abs(self.dec_degrees) + self.dec_minutes / 60.0 + self.dec_seconds / 3600.0
        return -value if self.negative_dec else value

    @classmethod
    def from_decimal(cls, ra_hours: float, dec_degrees: float) -> "Coordinates":
        if not -90.0 <= dec_degrees <= 90.0:
            raise InputError(f"Declination out of range [-90, 90]: {dec_degrees}")
        ra = ra_hours % 24.0
        ra_h = math.floor(ra)
        ra_m_decimal = (ra - ra_h) * 60.0
        ra_m = math.floor(ra_m_decimal)
        ra_s = (ra_m_decimal - ra_m) * 60.0

        negative_dec = dec_degrees < 0.0
        dec_abs = abs(dec_degrees)
        dec_d = math.floor(dec_abs)
        dec_m_decimal = (dec_abs - dec_d) * 60.0
        dec_m = math.floor(dec_m_decimal)
        dec_s = (dec_m_decimal - dec_m) * 60.0

        return cls(
            ra_hours=ra_h,
            ra_minutes=ra_m,
            ra_seconds=ra_s,
            dec_degrees=dec_d,
            dec_minutes=dec_m,
            dec_seconds=dec_s,
            negative_dec=negative_dec,
        )

    def format_ra(self) -> str:
        return f"{self.ra_hours:02d}h {self.ra_minutes:02d}m {self.ra_seconds:.1f}s"

    def format_dec(self) -> str:
        sign = "-" if self.negative_dec else "+"
        return f"{sign}{self.dec_degrees}° {self.dec_minutes:02d}' {self.dec_seconds:.1f}\""

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not 0 <= self.ra_hours < 24:
            errors.append("RA hours must be between 0 and 23")
        if not 0 <= self.ra_minutes < 60:
            errors.append("RA minutes must be between 0 and 59")
        if not 0.0 <= self.ra_seconds < 60.0:
            errors.append("RA seconds must be between 0 and 59.99")
        if not 0 <= self.dec_degrees <= 90:
            errors.append("Dec degrees must be between 0 and 90")
        if not 0 <= self.dec_minutes < 60:
            errors.append("Dec minutes must be between 0 and 59")
        if not 0.0 <= self.dec_seconds < 60.0:
            errors.append("Dec seconds must be between 0 and 59.99")
        if abs(self.dec_to_decimal()) > 90.0:
            errors.append("Declination must not exceed 90 degrees")
        return errors


@dataclass(frozen=True)
class VisibilityWindow:
    start_time: datetime.datetime
    end_time: datetime.datetime
    max_altitude: float
    max_altitude_time: datetime.datetime
    duration_hours: float
    is_visible: bool


@dataclass(frozen=True)
class TwilightTimes:
    date: str
    sunrise: datetime.datetime | None = None
    sunset: datetime.datetime | None = None
    civil_dawn: datetime.datetime | None = None
    civil_dusk: datetime.datetime | None = None
    nautical_dawn: datetime.datetime | None = None
    nautical_dusk: datetime.datetime | None = None
    astronomical_dawn: datetime.datetime | None = None
    astronomical_dusk: datetime.datetime | None = None
    is_polar_day: bool = False
    is_polar_night: bool = False


@dataclass(frozen=True)
class CelestialPosition:
    altitude: float
    azimuth: float
    ra_hours: float
    dec_degrees: float
    distance_km: float | None = None


@dataclass(frozen=True)
class MoonPhaseInfo:
    phase: float
    illumination: float
    phase_name: str
    age_days: float
    next_new_moon: datetime.datetime
    next_full_moon: datetime.datetime


@dataclass(frozen=True)
class ObservationQuality:
    score: float
    altitude_score: float
    twilight_score: float
    moon_score: float
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BatchCoordinateResult:
    id: str
    altitude: float
    azimuth: float
    hour_angle: float
    is_visible: bool
    air_mass: float | None = None
