from .batch import evaluate_batch, find_optimal_instant
from .ephemeris import (
    moon_illumination,
    moon_phase,
    moon_phase_info,
    moon_phase_name,
    moon_position,
    moon_position_at,
    sun_altitude,
    sun_position,
    sun_position_at,
)
from .scoring import score_observation
from .timescale import (
    from_julian_day,
    greenwich_sidereal_time,
    local_sidereal_time,
    to_julian_day,
)
from .transform import (
    air_mass,
    angular_separation,
    angular_separation_deg,
    equatorial_to_horizontal,
    hour_angle,
)
from .twilight import compute_twilight, dark_window, twilight_range
from .types import (
    BatchCoordinateResult,
    CelestialPosition,
    Coordinates,
    MoonPhaseInfo,
    ObservationQuality,
    ObserverLocation,
    TwilightTimes,
    VisibilityWindow,
)
from .visibility import (
    altitude_curve,
    compute_visibility_window,
    is_visible_at,
    visibility_range,
)

__all__ = [
    "BatchCoordinateResult",
    "CelestialPosition",
    "Coordinates",
    "MoonPhaseInfo",
    "ObservationQuality",
    "ObserverLocation",
    "TwilightTimes",
    "VisibilityWindow",
    "air_mass",
    "altitude_curve",
    "angular_separation",
    "angular_separation_deg",
    "compute_twilight",
    "compute_visibility_window",
    "dark_window",
    "equatorial_to_horizontal",
    "evaluate_batch",
    "find_optimal_instant",
    "from_julian_day",
    "greenwich_sidereal_time",
    "hour_angle",
    "is_visible_at",
    "local_sidereal_time",
    "moon_illumination",
    "moon_phase",
    "moon_phase_info",
    "moon_phase_name",
    "moon_position",
    "moon_position_at",
    "score_observation",
    "sun_altitude",
    "sun_position",
    "sun_position_at",
    "to_julian_day",
    "twilight_range",
    "visibility_range",
]
