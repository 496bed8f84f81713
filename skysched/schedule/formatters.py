import json
from dataclasses import asdict, is_dataclass

from skysched.astro.types import TwilightTimes
from skysched.util.format import format_duration, format_local_time

from .types import (
    ConflictResult,
    EtaResult,
    OptimizationResult,
    Sequence,
    TargetScheduleInfo,
)


def to_data(result):
    """Plain dict/list form of a result, ready for ``json.dumps``."""
    if is_dataclass(result):
        return asdict(result)
    if isinstance(result, dict):
        return {key: to_data(value) for key, value in result.items()}
    if isinstance(result, (list, tuple)):
        return [to_data(item) for item in result]
    return result


def format_json(result) -> str:
    return json.dumps(to_data(result), indent=2, default=str)


def format_optimization_text(result: OptimizationResult, sequence: Sequence) -> str:
    names = {t.id: t.name for t in sequence.targets}
    lines: list[str] = []
    lines.append(f"Optimized order: {sequence.title}")
    lines.append("=" * (17 + len(sequence.title)))
    for note in result.improvements:
        lines.append(note)
    lines.append("")
    if not result.optimized_order:
        lines.append("No targets.")
    name_w = min(40, max((len(names.get(i, i)) for i in result.optimized_order), default=0))
    for idx, target_id in enumerate(result.optimized_order, start=1):
        was = result.original_order.index(target_id) + 1
        name = _pad(_truncate(names.get(target_id, target_id), name_w), name_w)
        moved = "" if was == idx else f"  (was {was})"
        lines.append(f"{idx:>2}. {name}{moved}")
    lines.append("")
    lines.append(f"Imaging time: {format_duration(result.estimated_total_runtime)}")
    lines.append(f"Slew time:    {format_duration(result.estimated_slew_time)}")
    if result.warnings:
        lines.append("")
        lines.append("Warnings")
        lines.append("--------")
        lines.extend(result.warnings)
    return "\n".join(lines)


def format_conflicts_text(result: ConflictResult) -> str:
    if not result.has_conflicts:
        return "No scheduling conflicts."
    lines = [f"{len(result.conflicts)} scheduling conflict(s)", ""]
    for conflict in result.conflicts:
        kind = conflict.conflict_type.value.replace("_", " ")
        lines.append(f"- [{kind}] {conflict.description}")
    lines.append("")
    lines.append("Suggestions")
    lines.append("-----------")
    lines.extend(f"- {s}" for s in result.suggestions)
    return "\n".join(lines)


def format_twilight_text(twilight: TwilightTimes, utc_offset_h: float = 0.0) -> str:
    def fmt(dt):
        return format_local_time(dt, utc_offset_h, short=False)

    lines = [f"Twilight for {twilight.date} (UTC{utc_offset_h:+g})", ""]
    rows = [
        ("Astronomical dawn", twilight.astronomical_dawn),
        ("Nautical dawn", twilight.nautical_dawn),
        ("Civil dawn", twilight.civil_dawn),
        ("Sunrise", twilight.sunrise),
        ("Sunset", twilight.sunset),
        ("Civil dusk", twilight.civil_dusk),
        ("Nautical dusk", twilight.nautical_dusk),
        ("Astronomical dusk", twilight.astronomical_dusk),
    ]
    for label, value in rows:
        lines.append(f"{_pad(label, 18)} {fmt(value)}")
    if twilight.is_polar_day:
        lines.append("Polar day: the Sun does not set.")
    if twilight.is_polar_night:
        lines.append("Polar night: the Sun does not rise.")
    return "\n".join(lines)


def format_etas_text(
    etas: list[EtaResult],
    sequence: Sequence,
    utc_offset_h: float = 0.0,
) -> str:
    names = {t.id: t.name for t in sequence.targets}
    if not etas:
        return "No targets."
    name_w = min(40, max(len(names.get(e.target_id, e.target_id)) for e in etas))
    lines = []
    for idx, eta in enumerate(etas, start=1):
        name = _pad(_truncate(names.get(eta.target_id, eta.target_id), name_w), name_w)
        start = format_local_time(eta.eta_start, utc_offset_h, short=False)
        end = format_local_time(eta.eta_end, utc_offset_h, short=True)
        lines.append(f"{idx:>2}. {name}  {start} - {end}  {format_duration(eta.runtime)}")
    return "\n".join(lines)


def format_schedule_text(infos: list[TargetScheduleInfo], utc_offset_h: float = 0.0) -> str:
    if not infos:
        return "No targets."
    name_w = min(40, max(len(i.target_name) for i in infos))
    lines = []
    for info in infos:
        name = _pad(_truncate(info.target_name, name_w), name_w)
        window = info.visibility_window
        if not window.is_visible:
            lines.append(f"{name}  not visible")
            continue
        start = format_local_time(info.optimal_start_time, utc_offset_h)
        end = format_local_time(info.optimal_end_time, utc_offset_h)
        line = (
            f"{name}  {start}-{end}  peak {window.max_altitude:.0f}° "
            f"at {format_local_time(window.max_altitude_time, utc_offset_h)}  "
            f"score {info.quality_score:.1f}"
        )
        if info.notes:
            line = f"{line}  {'; '.join(info.notes)}"
        lines.append(line)
    return "\n".join(lines)


def _truncate(value: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:width]
    return value[: width - 3] + "..."


def _pad(value: str, width: int) -> str:
    if len(value) >= width:
        return value
    return value + (" " * (width - len(value)))
