from dataclasses import dataclass, replace
import datetime
import logging
from typing import Callable, Iterable

from skysched.astro.scoring import score_observation
from skysched.astro.transform import angular_separation
from skysched.astro.types import ObserverLocation, VisibilityWindow
from skysched.astro.visibility import compute_visibility_window
from skysched.util.concurrency import parallel_map

from .types import (
    CombinedWeights,
    OptimizationResult,
    OptimizationStrategy,
    Sequence,
    Target,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_ALTITUDE = 20.0
DEFAULT_SLEW_RATE_DEG_S = 3.0
DEFAULT_SETTLE_TIME_S = 5.0


@dataclass(frozen=True)
class _Evaluated:
    target: Target
    window: VisibilityWindow
    quality: float


def _evaluate(
    target: Target,
    location: ObserverLocation,
    date: datetime.date,
    min_altitude: float,
) -> _Evaluated:
    """Visibility window plus quality at peak altitude (0 when never visible)."""
    window = compute_visibility_window(target.coordinates, location, date, min_altitude)
    if window.is_visible:
        quality = score_observation(target.coordinates, location, window.max_altitude_time).score
    else:
        quality = 0.0
    return _Evaluated(target=target, window=window, quality=quality)


def _nearest_neighbour(items: list[_Evaluated]) -> list[_Evaluated]:
    if len(items) < 2:
        return list(items)
    remaining = list(items)
    first = next((i for i, item in enumerate(remaining) if item.window.is_visible), 0)
    route = [remaining.pop(first)]
    while remaining:
        last = route[-1].target.coordinates
        nearest = min(
            range(len(remaining)),
            key=lambda i: angular_separation(last, remaining[i].target.coordinates),
        )
        route.append(remaining.pop(nearest))
    return route


_Ordering = Callable[[list[_Evaluated], CombinedWeights], list[_Evaluated]]

# Every strategy maps to (ordering, improvement note).
_STRATEGIES: dict[OptimizationStrategy, tuple[_Ordering, str]] = {
    OptimizationStrategy.MAX_ALTITUDE: (
        lambda items, _w: sorted(items, key=lambda e: e.window.max_altitude, reverse=True),
        "Ordered by maximum altitude",
    ),
    OptimizationStrategy.TRANSIT_TIME: (
        lambda items, _w: sorted(items, key=lambda e: e.window.max_altitude_time),
        "Ordered by transit time",
    ),
    OptimizationStrategy.VISIBILITY_START: (
        lambda items, _w: sorted(items, key=lambda e: e.window.start_time),
        "Ordered by visibility window start",
    ),
    OptimizationStrategy.VISIBILITY_DURATION: (
        lambda items, _w: sorted(items, key=lambda e: e.window.duration_hours, reverse=True),
        "Ordered by visibility duration",
    ),
    OptimizationStrategy.MINIMIZE_SLEW: (
        lambda items, _w: _nearest_neighbour(items),
        "Optimized to minimize slew time",
    ),
    OptimizationStrategy.MOON_AVOIDANCE: (
        lambda items, _w: sorted(items, key=lambda e: e.quality, reverse=True),
        "Ordered by moon avoidance score",
    ),
    OptimizationStrategy.COMBINED: (
        lambda items, w: sorted(items, key=lambda e: w.score(e.window, e.quality), reverse=True),
        "Combined optimization applied",
    ),
}

_STRATEGY_LABELS = {
    OptimizationStrategy.MAX_ALTITUDE: (
        "Maximum Altitude",
        "Order targets by their maximum altitude (highest first)",
    ),
    OptimizationStrategy.TRANSIT_TIME: (
        "Transit Time",
        "Order targets by when they cross the meridian",
    ),
    OptimizationStrategy.VISIBILITY_START: (
        "Visibility Start",
        "Order targets by when they become visible",
    ),
    OptimizationStrategy.VISIBILITY_DURATION: (
        "Visibility Duration",
        "Order targets by how long they're visible (longest first)",
    ),
    OptimizationStrategy.MINIMIZE_SLEW: (
        "Minimize Slew",
        "Order targets to minimize telescope movement",
    ),
    OptimizationStrategy.MOON_AVOIDANCE: (
        "Moon Avoidance",
        "Order targets by distance from the Moon",
    ),
    OptimizationStrategy.COMBINED: (
        "Combined",
        "Use a combined optimization score",
    ),
}


def strategy_catalog() -> list[tuple[str, str, str]]:
    """(key, label, description) for every strategy."""
    return [(s.value, *_STRATEGY_LABELS[s]) for s in OptimizationStrategy]


def estimate_slew_time(
    targets: Iterable[Target],
    slew_rate_deg_s: float = DEFAULT_SLEW_RATE_DEG_S,
    settle_time_s: float = DEFAULT_SETTLE_TIME_S,
) -> float:
    """Seconds spent slewing and settling when visiting ``targets`` in order."""
    targets = list(targets)
    total = 0.0
    for prev, curr in zip(targets, targets[1:]):
        total += angular_separation(prev.coordinates, curr.coordinates) / slew_rate_deg_s + settle_time_s
    return total


def optimize_sequence(
    sequence: Sequence,
    location: ObserverLocation,
    date: datetime.date,
    strategy: OptimizationStrategy,
    *,
    min_altitude: float = DEFAULT_MIN_ALTITUDE,
    slew_rate_deg_s: float = DEFAULT_SLEW_RATE_DEG_S,
    settle_time_s: float = DEFAULT_SETTLE_TIME_S,
    weights: CombinedWeights = CombinedWeights(),
    max_workers: int | None = None,
) -> OptimizationResult:
    original_order = [t.id for t in sequence.targets]
    ordering, improvement = _STRATEGIES[strategy]
    logger.debug(
        "optimizing %d targets on %s with strategy %s",
        len(sequence.targets),
        date,
        strategy.value,
    )

    evaluated = parallel_map(
        lambda target: _evaluate(target, location, date, min_altitude),
        sequence.targets,
        max_workers=max_workers,
    )
    ordered = ordering(evaluated, weights)

    warnings = [
        f"Target '{e.target.name}' is not visible on this date"
        for e in ordered
        if not e.window.is_visible
    ]
    if warnings:
        logger.debug("%d targets not visible on %s", len(warnings), date)

    return OptimizationResult(
        success=True,
        original_order=original_order,
        optimized_order=[e.target.id for e in ordered],
        improvements=[improvement],
        warnings=warnings,
        estimated_total_runtime=sequence.total_runtime(),
        estimated_slew_time=estimate_slew_time(
            (e.target for e in ordered), slew_rate_deg_s, settle_time_s
        ),
    )


def apply_optimized_order(sequence: Sequence, order: Iterable[str]) -> Sequence:
    """Return a copy of ``sequence`` with its targets in ``order``; unknown ids are skipped."""
    by_id = {}
    for target in sequence.targets:
        by_id.setdefault(target.id, target)
    targets = [by_id[target_id] for target_id in order if target_id in by_id]
    return replace(sequence, targets=targets)
