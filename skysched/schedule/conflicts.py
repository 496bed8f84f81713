import datetime
import logging

from skysched.astro.types import ObserverLocation
from skysched.astro.visibility import compute_visibility_window
from skysched.util.concurrency import parallel_map

from .types import ConflictResult, ConflictType, ScheduleConflict, Sequence

logger = logging.getLogger(__name__)

CONFLICT_SUGGESTIONS = (
    "Consider splitting the session across multiple nights",
    "Prioritize targets with shorter visibility windows",
    "Reduce exposure counts for conflicting targets",
)


def detect_conflicts(
    sequence: Sequence,
    location: ObserverLocation,
    date: datetime.date,
    *,
    min_altitude: float = 20.0,
    max_workers: int | None = None,
) -> ConflictResult:
    """Flag targets that cannot all be imaged on ``date``.

    Each target is checked on its own (never visible, or needing more time than
    its window) and against every later visible target whose window overlaps
    its own by less than the two runtimes combined.
    """
    download_time = sequence.estimated_download_time
    windows = parallel_map(
        lambda t: compute_visibility_window(t.coordinates, location, date, min_altitude),
        sequence.targets,
        max_workers=max_workers,
    )
    info = [
        (target, window, target.runtime(download_time))
        for target, window in zip(sequence.targets, windows)
    ]

    conflicts = []
    for i, (target1, window1, runtime1) in enumerate(info):
        if not window1.is_visible:
            conflicts.append(
                ScheduleConflict(
                    target1_id=target1.id,
                    target1_name=target1.name,
                    conflict_type=ConflictType.VISIBILITY_GAP,
                    description=f"Target '{target1.name}' is not visible on this date",
                )
            )
            continue

        if runtime1 > window1.duration_hours * 3600.0:
            conflicts.append(
                ScheduleConflict(
                    target1_id=target1.id,
                    target1_name=target1.name,
                    conflict_type=ConflictType.INSUFFICIENT_TIME,
                    description=(
                        f"Target '{target1.name}' requires {runtime1 / 3600.0:.1f}h "
                        f"but visibility window is only {window1.duration_hours:.1f}h"
                    ),
                )
            )

        for target2, window2, runtime2 in info[i + 1:]:
            if not window2.is_visible:
                continue
            overlap_start = max(window1.start_time, window2.start_time)
            overlap_end = min(window1.end_time, window2.end_time)
            if overlap_start >= overlap_end:
                continue
            overlap = (overlap_end - overlap_start).total_seconds()
            if runtime1 + runtime2 > overlap:
                conflicts.append(
                    ScheduleConflict(
                        target1_id=target1.id,
                        target1_name=target1.name,
                        conflict_type=ConflictType.TIME_OVERLAP,
                        description=(
                            f"Targets '{target1.name}' and '{target2.name}' "
                            "have overlapping visibility with insufficient time"
                        ),
                        target2_id=target2.id,
                        target2_name=target2.name,
                    )
                )

    logger.debug("found %d conflicts for %d targets on %s", len(conflicts), len(info), date)
    return ConflictResult(
        has_conflicts=bool(conflicts),
        conflicts=conflicts,
        suggestions=list(CONFLICT_SUGGESTIONS) if conflicts else [],
    )
