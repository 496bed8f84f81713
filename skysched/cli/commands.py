import datetime
import json
import logging
import sys
from dataclasses import fields
from pathlib import Path

from skysched.astro import (
    Coordinates,
    ObserverLocation,
    compute_twilight,
    compute_visibility_window,
    evaluate_batch,
    find_optimal_instant,
    moon_phase_info,
    moon_position_at,
    score_observation,
    sun_position_at,
    twilight_range,
    visibility_range,
)
from skysched.config import Config, load_config
from skysched.errors import InputError
from skysched.schedule import (
    CombinedWeights,
    OptimizationStrategy,
    Sequence,
    apply_optimized_order,
    calculate_etas_parallel,
    detect_conflicts,
    estimate_session_time,
    find_best_observation_date,
    get_schedule_info,
    optimize_sequence,
    strategy_catalog,
    validate_sequence_for_date,
)
from skysched.schedule.formatters import (
    format_conflicts_text,
    format_etas_text,
    format_optimization_text,
    format_schedule_text,
    format_twilight_text,
    to_data,
)
from skysched.util.format import deg_to_dms, format_duration, format_local_time, hours_to_hms
from skysched.util.parse import parse_date, parse_date_range, parse_dec, parse_instant, parse_ra

logger = logging.getLogger(__name__)


def _json_envelope(command: str, ok: bool, data=None, error=None) -> dict:
    return {
        "ok": ok,
        "command": command,
        "timestamp_utc": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "data": data,
        "error": error,
    }


def _init_logging(level: str | None) -> None:
    if not level:
        return
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "error": logging.ERROR,
    }
    logging.basicConfig(level=level_map.get(level, logging.INFO))


def _config_path_from_args(args) -> Path | None:
    if args is None:
        return None
    path = getattr(args, "config", None)
    return Path(path) if path else None


def _emit(args, command: str, result, text: str) -> int:
    if getattr(args, "json", False):
        payload = _json_envelope(command=command, ok=True, data=to_data(result), error=None)
        print(json.dumps(payload, indent=2, default=str))
    else:
        print(text)
    return 0


def _handle_input_error(command: str, args, exc: ValueError) -> int:
    if getattr(args, "json", False):
        payload = _json_envelope(
            command=command,
            ok=False,
            data=None,
            error={"code": "invalid_input", "message": str(exc), "details": None},
        )
        print(json.dumps(payload, indent=2))
    else:
        print(str(exc), file=sys.stderr)
    return 2


def _parse_location_args(args, config: Config) -> ObserverLocation:
    lat = getattr(args, "latitude_deg", None)
    lon = getattr(args, "longitude_deg", None)
    if lat is None:
        lat = config.site_latitude_deg
    if lon is None:
        lon = config.site_longitude_deg
    if lat is None or lon is None:
        raise InputError(
            "Location is required (use --lat/--lon or set site.latitude_deg/site.longitude_deg)"
        )
    elev = getattr(args, "elevation_m", None)
    offset = getattr(args, "utc_offset_h", None)
    return ObserverLocation(
        latitude_deg=float(lat),
        longitude_deg=float(lon),
        elevation_m=float(elev if elev is not None else config.site_elevation_m),
        utc_offset_h=float(offset if offset is not None else config.site_utc_offset_h),
        name=config.site_name,
    )


def _parse_coordinates_args(args) -> Coordinates:
    return Coordinates.from_decimal(parse_ra(args.ra), parse_dec(args.dec))


def _date_arg(value: str | None) -> datetime.date:
    if not value:
        return datetime.datetime.now(datetime.timezone.utc).date()
    return parse_date(value)


def _instant_arg(value: str | None) -> datetime.datetime:
    return parse_instant(value) or datetime.datetime.now(datetime.timezone.utc)


def _min_altitude(args, config: Config) -> float:
    value = getattr(args, "min_altitude", None)
    return float(value if value is not None else config.min_altitude_deg)


def _combined_weights(config: Config) -> CombinedWeights:
    known = {f.name for f in fields(CombinedWeights)}
    overrides = {k: float(v) for k, v in config.combined_weights.items() if k in known}
    return CombinedWeights(**overrides)


def _load_sequence(args, config: Config) -> Sequence:
    path = Path(args.sequence)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise InputError(f"Sequence file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise InputError(f"Sequence file is not valid JSON: {path} ({e})") from e
    if (
        isinstance(data, dict)
        and config.download_time_s is not None
        and "estimated_download_time" not in data
        and "estimatedDownloadTime" not in data
    ):
        data = {**data, "estimated_download_time": config.download_time_s}
    sequence = Sequence.from_dict(data)
    logger.debug("loaded sequence %r with %d targets", sequence.title, len(sequence.targets))
    return sequence


def run_twilight(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        if args.end_date:
            start, end = parse_date_range(args.date, args.end_date)
            result = twilight_range(location, start, end)
            text = "\n\n".join(format_twilight_text(t, location.utc_offset_h) for t in result)
        else:
            result = compute_twilight(location, _date_arg(args.date))
            text = format_twilight_text(result, location.utc_offset_h)
        return _emit(args, "twilight", result, text)
    except ValueError as e:
        return _handle_input_error("twilight", args, e)


def run_moon(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        instant = _instant_arg(args.at)
        info = moon_phase_info(instant)
        data = {"phase": info, "position": None}
        lines = [
            f"Phase: {info.phase_name} ({info.illumination:.0f}% lit, age {info.age_days:.1f} d)",
            f"Next new moon:  {format_local_time(info.next_new_moon, short=False)} UTC",
            f"Next full moon: {format_local_time(info.next_full_moon, short=False)} UTC",
        ]
        has_site = getattr(args, "latitude_deg", None) is not None or config.site_latitude_deg is not None
        if has_site:
            location = _parse_location_args(args, config)
            position = moon_position_at(location, instant)
            data["position"] = position
            lines.append(f"Altitude: {position.altitude:.1f}°  Azimuth: {position.azimuth:.1f}°")
            lines.append(f"Distance: {position.distance_km:,.0f} km")
        return _emit(args, "moon", data, "\n".join(lines))
    except ValueError as e:
        return _handle_input_error("moon", args, e)


def run_sun(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        position = sun_position_at(location, _instant_arg(args.at))
        text = "\n".join(
            [
                f"RA:  {hours_to_hms(position.ra_hours)}",
                f"Dec: {deg_to_dms(position.dec_degrees)}",
                f"Altitude: {position.altitude:.1f}°  Azimuth: {position.azimuth:.1f}°",
            ]
        )
        return _emit(args, "sun", position, text)
    except ValueError as e:
        return _handle_input_error("sun", args, e)


def run_visibility(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        coords = _parse_coordinates_args(args)
        min_alt = _min_altitude(args, config)
        if args.end_date:
            start, end = parse_date_range(args.date, args.end_date)
            windows = visibility_range(coords, location, start, end, min_alt)
            result = windows
        else:
            result = compute_visibility_window(coords, location, _date_arg(args.date), min_alt)
            windows = [result]
        lines = []
        for w in windows:
            day = format_local_time(w.start_time, short=False)[:10]
            if not w.is_visible:
                lines.append(f"{day}  not above {min_alt:.0f}°")
                continue
            lines.append(
                f"{day}  {format_local_time(w.start_time, location.utc_offset_h)}"
                f"-{format_local_time(w.end_time, location.utc_offset_h)}"
                f"  ({w.duration_hours:.1f} h)  peak {w.max_altitude:.1f}°"
                f" at {format_local_time(w.max_altitude_time, location.utc_offset_h)}"
            )
        return _emit(args, "visibility", result, "\n".join(lines))
    except ValueError as e:
        return _handle_input_error("visibility", args, e)


def run_quality(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        quality = score_observation(_parse_coordinates_args(args), location, _instant_arg(args.at))
        lines = [
            f"Score: {quality.score:.1f} / 100",
            f"  altitude {quality.altitude_score:.1f}  twilight {quality.twilight_score:.1f}"
            f"  moon {quality.moon_score:.1f}",
        ]
        lines.extend(f"- {r}" for r in quality.recommendations)
        return _emit(args, "quality", quality, "\n".join(lines))
    except ValueError as e:
        return _handle_input_error("quality", args, e)


def run_optimal(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        best = find_optimal_instant(
            _parse_coordinates_args(args),
            location,
            _date_arg(args.date),
            _min_altitude(args, config),
        )
        if best is None:
            text = "No suitable time during astronomical darkness."
        else:
            text = f"Best time: {format_local_time(best, location.utc_offset_h, short=False)}"
        return _emit(args, "optimal", {"optimal_time": best}, text)
    except ValueError as e:
        return _handle_input_error("optimal", args, e)


def run_batch(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        sequence = _load_sequence(args, config)
        results = evaluate_batch(
            [(t.id, t.coordinates) for t in sequence.targets],
            location,
            _instant_arg(args.at),
            _min_altitude(args, config),
            max_workers=config.max_workers,
        )
        lines = []
        for r in results:
            am = f"{r.air_mass:.2f}" if r.air_mass is not None else "--"
            flag = "up" if r.is_visible else "low"
            lines.append(
                f"{r.id:<20} alt {r.altitude:6.1f}°  az {r.azimuth:6.1f}°"
                f"  HA {r.hour_angle:7.1f}°  X {am:>5}  {flag}"
            )
        return _emit(args, "batch", results, "\n".join(lines))
    except ValueError as e:
        return _handle_input_error("batch", args, e)


def run_optimize(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        sequence = _load_sequence(args, config)
        strategy = OptimizationStrategy.parse(args.strategy)
        result = optimize_sequence(
            sequence,
            location,
            _date_arg(args.date),
            strategy,
            min_altitude=_min_altitude(args, config),
            slew_rate_deg_s=float(config.slew_rate_deg_s),
            settle_time_s=float(config.settle_time_s),
            weights=_combined_weights(config),
            max_workers=config.max_workers,
        )
        if args.output:
            reordered = apply_optimized_order(sequence, result.optimized_order)
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(to_data(reordered), f, indent=2)
            logger.info("wrote reordered sequence to %s", args.output)
        return _emit(args, "optimize", result, format_optimization_text(result, sequence))
    except ValueError as e:
        return _handle_input_error("optimize", args, e)


def run_conflicts(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        result = detect_conflicts(
            _load_sequence(args, config),
            location,
            _date_arg(args.date),
            min_altitude=_min_altitude(args, config),
            max_workers=config.max_workers,
        )
        return _emit(args, "conflicts", result, format_conflicts_text(result))
    except ValueError as e:
        return _handle_input_error("conflicts", args, e)


def run_etas(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        sequence = _load_sequence(args, config)
        offset = args.utc_offset_h if args.utc_offset_h is not None else config.site_utc_offset_h
        etas = calculate_etas_parallel(
            sequence,
            _instant_arg(args.start),
            threshold=int(config.parallel_threshold),
            max_workers=config.max_workers,
        )
        return _emit(args, "etas", etas, format_etas_text(etas, sequence, float(offset)))
    except ValueError as e:
        return _handle_input_error("etas", args, e)


def run_schedule(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        infos = get_schedule_info(
            _load_sequence(args, config),
            location,
            _date_arg(args.date),
            min_altitude=_min_altitude(args, config),
            max_workers=config.max_workers,
        )
        return _emit(args, "schedule", infos, format_schedule_text(infos, location.utc_offset_h))
    except ValueError as e:
        return _handle_input_error("schedule", args, e)


def run_validate(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        report = validate_sequence_for_date(
            _load_sequence(args, config),
            location,
            _date_arg(args.date),
            min_altitude=_min_altitude(args, config),
            max_workers=config.max_workers,
        )
        lines = [
            f"Date: {report.date}",
            f"Visible targets: {report.visible_targets} / {report.total_targets}",
            f"Visibility hours: {report.total_visibility_hours:.1f}",
            f"Average quality: {report.average_quality_score:.1f}",
            f"Conflicts: {report.conflict_count}",
        ]
        lines.extend(f"- {r}" for r in report.recommendations)
        return _emit(args, "validate", report, "\n".join(lines))
    except ValueError as e:
        return _handle_input_error("validate", args, e)


def run_best_date(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        start, end = parse_date_range(args.start_date, args.end_date)
        result = find_best_observation_date(
            _load_sequence(args, config),
            location,
            start,
            end,
            min_altitude=_min_altitude(args, config),
            max_workers=config.max_workers,
        )
        lines = [f"Best date: {result.best_date} (score {result.best_score:.1f})", ""]
        lines.extend(f"{day}  {score:7.1f}" for day, score in result.date_scores)
        return _emit(args, "best-date", result, "\n".join(lines))
    except ValueError as e:
        return _handle_input_error("best-date", args, e)


def run_session(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    config = load_config(_config_path_from_args(args))
    try:
        location = _parse_location_args(args, config)
        estimate = estimate_session_time(
            _load_sequence(args, config),
            location,
            _date_arg(args.date),
            include_slew_time=not args.no_slew,
            slew_rate_deg_s=float(config.slew_rate_deg_s),
            settle_time_s=float(config.settle_time_s),
        )
        lines = [
            f"Imaging:   {format_duration(estimate.imaging_time_seconds)}",
            f"Slewing:   {format_duration(estimate.slew_time_seconds)}",
            f"Autofocus: {format_duration(estimate.autofocus_time_seconds)}",
            f"Centering: {format_duration(estimate.centering_time_seconds)}",
            f"Total:     {format_duration(estimate.total_time_seconds)}",
            f"Darkness:  {format_duration(estimate.available_dark_time_seconds)}",
            f"Fits in night: {'yes' if estimate.fits_in_night else 'no'}"
            f" ({estimate.utilization_percentage:.0f}% of darkness)",
        ]
        return _emit(args, "session", estimate, "\n".join(lines))
    except ValueError as e:
        return _handle_input_error("session", args, e)


def run_strategies(args) -> int:
    _init_logging(getattr(args, "log_level", None))
    catalog = strategy_catalog()
    data = [{"key": key, "label": label, "description": desc} for key, label, desc in catalog]
    text = "\n".join(f"{key:<20} {label:<20} {desc}" for key, label, desc in catalog)
    return _emit(args, "strategies", data, text)
