"""Per-target fan-out helpers: ETAs, schedule info and visibility windows.

All of these return one result per target in the order the targets were given,
whether the work ran in-line or on a thread pool.
"""

import datetime
from itertools import accumulate
import logging
from typing import Iterable

from skysched.astro.scoring import score_observation
from skysched.astro.types import ObserverLocation, VisibilityWindow
from skysched.astro.visibility import compute_visibility_window
from skysched.util.concurrency import DEFAULT_PARALLEL_THRESHOLD, parallel_map

from .types import EtaResult, Sequence, Target, TargetScheduleInfo

logger = logging.getLogger(__name__)

NOT_VISIBLE_NOTE = "Target not visible"


def calculate_etas_parallel(
    sequence: Sequence,
    start_time: datetime.datetime,
    *,
    threshold: int = DEFAULT_PARALLEL_THRESHOLD,
    max_workers: int | None = None,
) -> list[EtaResult]:
    """Back-to-back start and end estimates for each target from ``start_time``."""
    download_time = sequence.estimated_download_time
    targets = sequence.targets

    if len(targets) <= threshold:
        results = []
        current = start_time
        for target in targets:
            runtime = target.runtime(download_time)
            end = current + datetime.timedelta(seconds=runtime)
            results.append(EtaResult(target_id=target.id, runtime=runtime, eta_start=current, eta_end=end))
            current = end
        return results

    runtimes = parallel_map(
        lambda t: t.runtime(download_time),
        targets,
        max_workers=max_workers,
        threshold=threshold,
    )
    offsets = [0.0, *accumulate(runtimes)]
    return [
        EtaResult(
            target_id=target.id,
            runtime=runtime,
            eta_start=start_time + datetime.timedelta(seconds=offset),
            eta_end=start_time + datetime.timedelta(seconds=offset + runtime),
        )
        for target, runtime, offset in zip(targets, runtimes, offsets)
    ]


def get_schedule_info(
    sequence: Sequence,
    location: ObserverLocation,
    date: datetime.date,
    *,
    min_altitude: float = 20.0,
    max_workers: int | None = None,
) -> list[TargetScheduleInfo]:
    """Centre each target's runtime on its peak altitude and score it there."""
    download_time = sequence.estimated_download_time

    def schedule(target: Target) -> TargetScheduleInfo:
        window = compute_visibility_window(target.coordinates, location, date, min_altitude)
        if not window.is_visible:
            return TargetScheduleInfo(
                target_id=target.id,
                target_name=target.name,
                visibility_window=window,
                optimal_start_time=None,
                optimal_end_time=None,
                quality_score=0.0,
                notes=[NOT_VISIBLE_NOTE],
            )
        quality = score_observation(target.coordinates, location, window.max_altitude_time)
        runtime = target.runtime(download_time)
        start = window.max_altitude_time - datetime.timedelta(seconds=runtime / 2.0)
        return TargetScheduleInfo(
            target_id=target.id,
            target_name=target.name,
            visibility_window=window,
            optimal_start_time=start,
            optimal_end_time=start + datetime.timedelta(seconds=runtime),
            quality_score=quality.score,
            notes=list(quality.recommendations),
        )

    logger.debug("scheduling %d targets on %s", len(sequence.targets), date)
    return parallel_map(schedule, sequence.targets, max_workers=max_workers)


def calculate_visibility_parallel(
    targets: Iterable[Target],
    location: ObserverLocation,
    date: datetime.date,
    min_altitude: float,
    *,
    max_workers: int | None = None,
) -> list[tuple[str, VisibilityWindow]]:
    return parallel_map(
        lambda t: (t.id, compute_visibility_window(t.coordinates, location, date, min_altitude)),
        targets,
        max_workers=max_workers,
    )
