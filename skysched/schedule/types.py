from dataclasses import dataclass, field
import datetime
from enum import Enum
from typing import Any, Callable, Mapping

from skysched.astro.types import Coordinates, VisibilityWindow
from skysched.errors import InputError
from skysched.util.parse import parse_dec, parse_ra

DEFAULT_DOWNLOAD_TIME_S = 5.0


def _get(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Look up ``key`` in snake_case, falling back to its camelCase spelling."""
    if key in data:
        return data[key]
    head, *rest = key.split("_")
    camel = head + "".join(part.capitalize() for part in rest)
    return data.get(camel, default)


def _number(convert: Callable[[Any], Any], value: Any, what: str) -> Any:
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise InputError(f"{what} must be a number, got {value!r}") from e


@dataclass(frozen=True)
class Exposure:
    exposure_time: float
    total_count: int
    progress_count: int = 0
    enabled: bool = True
    filter_name: str | None = None
    id: str | None = None

    def remaining(self) -> int:
        return max(self.total_count - self.progress_count, 0)

    def runtime(self, download_time: float) -> float:
        """Seconds still needed for this exposure set, downloads included."""
        if not self.enabled:
            return 0.0
        return self.remaining() * (self.exposure_time + download_time)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], target_name: str = "?") -> "Exposure":
        if not isinstance(data, Mapping):
            raise InputError(f"Target '{target_name}': each exposure must be a JSON object")
        exposure_time = _get(data, "exposure_time")
        if exposure_time is None:
            raise InputError(f"Target '{target_name}': exposure is missing 'exposure_time'")
        filter_name = _get(data, "filter_name", data.get("filter"))
        if isinstance(filter_name, Mapping):
            filter_name = filter_name.get("name")
        where = f"Target '{target_name}' exposure"
        return cls(
            exposure_time=_number(float, exposure_time, f"{where} 'exposure_time'"),
            total_count=_number(int, _get(data, "total_count", 1), f"{where} 'total_count'"),
            progress_count=_number(int, _get(data, "progress_count", 0), f"{where} 'progress_count'"),
            enabled=bool(data.get("enabled", True)),
            filter_name=filter_name,
            id=data.get("id"),
        )


@dataclass(frozen=True)
class Target:
    id: str
    name: str
    coordinates: Coordinates
    exposures: list[Exposure] = field(default_factory=list)
    delay: float = 0.0
    auto_focus_on_start: bool = False
    center_target: bool = False

    def runtime(self, download_time: float) -> float:
        return self.delay + sum(e.runtime(download_time) for e in self.exposures)

    def total_exposure_count(self) -> int:
        return sum(e.total_count for e in self.exposures)

    def remaining_exposure_count(self) -> int:
        return sum(e.remaining() for e in self.exposures)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> "Target":
        if not isinstance(data, Mapping):
            raise InputError(f"Target {index + 1} must be a JSON object, got {data!r}")
        target_id = data.get("id")
        name = data.get("name") or _get(data, "target_name")
        if target_id is None:
            target_id = name or f"target-{index + 1}"
        if name is None:
            name = str(target_id)
        name = str(name)
        exposures = data.get("exposures") or []
        if not isinstance(exposures, list):
            raise InputError(f"Target '{name}': 'exposures' must be a list")
        return cls(
            id=str(target_id),
            name=name,
            coordinates=_coordinates_from_dict(data, name),
            exposures=[Exposure.from_dict(e, name) for e in exposures],
            delay=_number(float, data.get("delay", 0.0), f"Target '{name}' 'delay'"),
            auto_focus_on_start=bool(_get(data, "auto_focus_on_start", False)),
            center_target=bool(_get(data, "center_target", False)),
        )


def _coordinates_from_dict(data: Mapping[str, Any], name: str) -> Coordinates:
    parts = data.get("coordinates")
    if parts is not None:
        if not isinstance(parts, Mapping):
            raise InputError(f"Target '{name}': 'coordinates' must be a JSON object")

        def part(convert, key, default):
            return _number(convert, _get(parts, key, default), f"Target '{name}' coordinate '{key}'")

        coords = Coordinates(
            ra_hours=part(int, "ra_hours", 0),
            ra_minutes=part(int, "ra_minutes", 0),
            ra_seconds=part(float, "ra_seconds", 0.0),
            dec_degrees=part(int, "dec_degrees", 0),
            dec_minutes=part(int, "dec_minutes", 0),
            dec_seconds=part(float, "dec_seconds", 0.0),
            negative_dec=bool(_get(parts, "negative_dec", False)),
        )
        errors = coords.validate()
        if errors:
            raise InputError(f"Target '{name}': " + "; ".join(errors))
        return coords
    ra = data.get("ra")
    dec = data.get("dec")
    if ra is None or dec is None:
        raise InputError(f"Target '{name}' needs 'coordinates' or both 'ra' and 'dec'")
    return Coordinates.from_decimal(parse_ra(str(ra)), parse_dec(str(dec)))


@dataclass(frozen=True)
class Sequence:
    title: str
    targets: list[Target] = field(default_factory=list)
    estimated_download_time: float = DEFAULT_DOWNLOAD_TIME_S

    def total_runtime(self) -> float:
        return sum(t.runtime(self.estimated_download_time) for t in self.targets)

    def remaining_exposure_count(self) -> int:
        return sum(t.remaining_exposure_count() for t in self.targets)

    def find_target(self, target_id: str) -> Target | None:
        for target in self.targets:
            if target.id == target_id:
                return target
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Sequence":
        """Build a sequence from decoded JSON.

        Keys may be snake_case or camelCase. A target gives its position either
        as a ``coordinates`` object of sexagesimal parts or as ``ra``/``dec``
        values in any form ``parse_ra``/``parse_dec`` accept.
        """
        if not isinstance(data, Mapping):
            raise InputError("Sequence must be a JSON object")
        raw_targets = data.get("targets") or []
        if not isinstance(raw_targets, list):
            raise InputError("Sequence 'targets' must be a list")
        targets = [Target.from_dict(t, i) for i, t in enumerate(raw_targets)]
        download_time = _number(
            float,
            _get(data, "estimated_download_time", DEFAULT_DOWNLOAD_TIME_S),
            "Sequence 'estimated_download_time'",
        )
        return cls(
            title=str(data.get("title", "Target Set")),
            targets=targets,
            estimated_download_time=download_time,
        )


class OptimizationStrategy(str, Enum):
    MAX_ALTITUDE = "max_altitude"
    TRANSIT_TIME = "transit_time"
    VISIBILITY_START = "visibility_start"
    VISIBILITY_DURATION = "visibility_duration"
    MINIMIZE_SLEW = "minimize_slew"
    MOON_AVOIDANCE = "moon_avoidance"
    COMBINED = "combined"

    @classmethod
    def parse(cls, name: str) -> "OptimizationStrategy":
        """Accept ``max_altitude``, ``maxaltitude``, ``max-altitude`` or ``MaxAltitude``."""
        key = name.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
        for member in cls:
            if member.value.replace("_", "") == key:
                return member
        valid = ", ".join(member.value for member in cls)
        raise InputError(f"Unknown optimization strategy: {name!r} (expected one of {valid})")


class ConflictType(str, Enum):
    TIME_OVERLAP = "time_overlap"
    INSUFFICIENT_TIME = "insufficient_time"
    VISIBILITY_GAP = "visibility_gap"
    # Reserved; no check emits it yet.
    MERIDIAN_FLIP = "meridian_flip"


@dataclass(frozen=True)
class CombinedWeights:
    """Weights of the combined ordering score.

    The defaults are a tuning choice: a target at the zenith earns ``altitude``
    points, quality is scaled by ``quality`` and a twelve-hour window earns
    ``duration`` points.
    """

    altitude: float = 30.0
    quality: float = 0.5
    duration: float = 20.0

    def score(self, window: VisibilityWindow, quality: float) -> float:
        return (
            window.max_altitude / 90.0 * self.altitude
            + quality * self.quality
            + window.duration_hours / 12.0 * self.duration
        )


@dataclass(frozen=True)
class ScheduleConflict:
    target1_id: str
    target1_name: str
    conflict_type: ConflictType
    description: str
    target2_id: str | None = None
    target2_name: str | None = None


@dataclass(frozen=True)
class ConflictResult:
    has_conflicts: bool
    conflicts: list[ScheduleConflict] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OptimizationResult:
    success: bool
    original_order: list[str]
    optimized_order: list[str]
    improvements: list[str]
    warnings: list[str]
    estimated_total_runtime: float
    estimated_slew_time: float


@dataclass(frozen=True)
class TargetScheduleInfo:
    target_id: str
    target_name: str
    visibility_window: VisibilityWindow
    optimal_start_time: datetime.datetime | None
    optimal_end_time: datetime.datetime | None
    quality_score: float
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EtaResult:
    target_id: str
    runtime: float
    eta_start: datetime.datetime
    eta_end: datetime.datetime


@dataclass(frozen=True)
class ValidationReport:
    date: str
    total_targets: int
    visible_targets: int
    has_conflicts: bool
    conflict_count: int
    total_visibility_hours: float
    average_quality_score: float
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BestDateResult:
    best_date: str
    best_score: float
    date_scores: list[tuple[str, float]] = field(default_factory=list)


@dataclass(frozen=True)
class SessionTimeEstimate:
    imaging_time_seconds: float
    slew_time_seconds: float
    autofocus_time_seconds: float
    centering_time_seconds: float
    total_time_seconds: float
    available_dark_time_seconds: float
    fits_in_night: bool
    utilization_percentage: float
