import datetime
import logging
from typing import Sequence

from skysched.util.concurrency import parallel_map

from .scoring import score_observation
from .timescale import to_julian_day
from .transform import air_mass, equatorial_to_horizontal, hour_angle
from .twilight import dark_window
from .types import BatchCoordinateResult, Coordinates, ObserverLocation

logger = logging.getLogger(__name__)

OPTIMAL_SEARCH_STEP = datetime.timedelta(minutes=15)


def evaluate_batch(
    targets: Sequence[tuple[str, Coordinates]],
    location: ObserverLocation,
    instant: datetime.datetime,
    min_altitude: float,
    max_workers: int | None = None,
) -> list[BatchCoordinateResult]:
    """Horizontal position of every ``(id, coords)`` pair at one instant, in input order."""
    jd = to_julian_day(instant)

    def evaluate(item: tuple[str, Coordinates]) -> BatchCoordinateResult:
        target_id, coords = item
        ra = coords.ra_to_decimal()
        dec = coords.dec_to_decimal()
        alt, az = equatorial_to_horizontal(ra, dec, location.latitude_deg, location.longitude_deg, jd)
        return BatchCoordinateResult(
            id=target_id,
            altitude=alt,
            azimuth=az,
            hour_angle=hour_angle(ra, location.longitude_deg, jd),
            is_visible=alt >= min_altitude,
            air_mass=air_mass(alt),
        )

    logger.debug("evaluating %d targets at %s", len(targets), instant.isoformat())
    return parallel_map(evaluate, targets, max_workers=max_workers)


def find_optimal_instant(
    coords: Coordinates,
    location: ObserverLocation,
    date: datetime.date,
    min_altitude: float,
) -> datetime.datetime | None:
    """Best-scoring 15-minute sample inside the night's astronomical darkness.

    Only samples with the target at or above ``min_altitude`` compete; the
    earliest sample wins a tie. None when there is no darkness or no sample
    qualifies.
    """
    window = dark_window(location, date)
    if window is None:
        logger.debug("no astronomical darkness on %s", date)
        return None
    dark_start, dark_end = window

    ra = coords.ra_to_decimal()
    dec = coords.dec_to_decimal()
    best_time = None
    best_score = -1.0
    current = dark_start
    while current < dark_end:
        alt, _ = equatorial_to_horizontal(
            ra, dec, location.latitude_deg, location.longitude_deg, to_julian_day(current)
        )
        if alt >= min_altitude:
            score = score_observation(coords, location, current).score
            if score > best_score:
                best_score = score
                best_time = current
        current += OPTIMAL_SEARCH_STEP
    return best_time
