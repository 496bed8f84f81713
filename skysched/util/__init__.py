from .concurrency import parallel_map
from .format import (
    deg_to_dms,
    format_duration,
    format_local_time,
    hours_to_hms,
)
from .parse import (
    parse_date,
    parse_date_range,
    parse_dec,
    parse_instant,
    parse_ra,
)

__all__ = [
    "deg_to_dms",
    "format_duration",
    "format_local_time",
    "hours_to_hms",
    "parallel_map",
    "parse_date",
    "parse_date_range",
    "parse_dec",
    "parse_instant",
    "parse_ra",
]
