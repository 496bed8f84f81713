import datetime
import logging

from skysched.astro.twilight import dark_window
from skysched.astro.types import ObserverLocation
from skysched.util.parse import check_date_range

from .conflicts import detect_conflicts
from .optimizer import DEFAULT_SETTLE_TIME_S, DEFAULT_SLEW_RATE_DEG_S, estimate_slew_time
from .parallel import get_schedule_info
from .types import BestDateResult, SessionTimeEstimate, Sequence, ValidationReport

logger = logging.getLogger(__name__)

AUTOFOCUS_TIME_S = 120.0
CENTERING_TIME_S = 60.0
# Weight of one visible hour against quality points when ranking dates.
DURATION_WEIGHT = 5.0


def validate_sequence_for_date(
    sequence: Sequence,
    location: ObserverLocation,
    date: datetime.date,
    *,
    min_altitude: float = 20.0,
    max_workers: int | None = None,
) -> ValidationReport:
    conflicts = detect_conflicts(
        sequence, location, date, min_altitude=min_altitude, max_workers=max_workers
    )
    visible = [
        info
        for info in get_schedule_info(
            sequence, location, date, min_altitude=min_altitude, max_workers=max_workers
        )
        if info.visibility_window.is_visible
    ]
    average_quality = sum(i.quality_score for i in visible) / len(visible) if visible else 0.0
    return ValidationReport(
        date=date.strftime("%Y-%m-%d"),
        total_targets=len(sequence.targets),
        visible_targets=len(visible),
        has_conflicts=conflicts.has_conflicts,
        conflict_count=len(conflicts.conflicts),
        total_visibility_hours=sum(i.visibility_window.duration_hours for i in visible),
        average_quality_score=average_quality,
        recommendations=list(conflicts.suggestions),
    )


def find_best_observation_date(
    sequence: Sequence,
    location: ObserverLocation,
    start_date: datetime.date,
    end_date: datetime.date,
    *,
    min_altitude: float = 20.0,
    max_workers: int | None = None,
) -> BestDateResult:
    """Rank each night in the inclusive range by summed quality and visible hours.

    The earliest date wins a tie. A range where nothing is ever visible reports
    the start date with a score of 0.
    """
    check_date_range(start_date, end_date)
    best_date = start_date
    best_score = 0.0
    date_scores = []
    for offset in range((end_date - start_date).days + 1):
        date = start_date + datetime.timedelta(days=offset)
        score = sum(
            info.quality_score + info.visibility_window.duration_hours * DURATION_WEIGHT
            for info in get_schedule_info(
                sequence, location, date, min_altitude=min_altitude, max_workers=max_workers
            )
            if info.visibility_window.is_visible
        )
        date_scores.append((date.strftime("%Y-%m-%d"), score))
        if score > best_score:
            best_score = score
            best_date = date
    logger.debug("best date in %s..%s is %s (%.1f)", start_date, end_date, best_date, best_score)
    return BestDateResult(
        best_date=best_date.strftime("%Y-%m-%d"),
        best_score=best_score,
        date_scores=date_scores,
    )


def estimate_session_time(
    sequence: Sequence,
    location: ObserverLocation,
    date: datetime.date,
    include_slew_time: bool = True,
    *,
    slew_rate_deg_s: float = DEFAULT_SLEW_RATE_DEG_S,
    settle_time_s: float = DEFAULT_SETTLE_TIME_S,
) -> SessionTimeEstimate:
    """Total time the sequence needs, in its current order, against the night's darkness."""
    imaging = sequence.total_runtime()
    slew = estimate_slew_time(sequence.targets, slew_rate_deg_s, settle_time_s) if include_slew_time else 0.0
    autofocus = sum(1 for t in sequence.targets if t.auto_focus_on_start) * AUTOFOCUS_TIME_S
    centering = sum(1 for t in sequence.targets if t.center_target) * CENTERING_TIME_S
    total = imaging + slew + autofocus + centering

    window = dark_window(location, date)
    available = (window[1] - window[0]).total_seconds() if window else 0.0
    utilization = min(total / available * 100.0, 100.0) if available > 0 else 0.0

    return SessionTimeEstimate(
        imaging_time_seconds=imaging,
        slew_time_seconds=slew,
        autofocus_time_seconds=autofocus,
        centering_time_seconds=centering,
        total_time_seconds=total,
        available_dark_time_seconds=available,
        fits_in_night=total <= available,
        utilization_percentage=utilization,
    )
