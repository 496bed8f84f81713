from .conflicts import detect_conflicts
from .optimizer import (
    apply_optimized_order,
    estimate_slew_time,
    optimize_sequence,
    strategy_catalog,
)
from .parallel import (
    calculate_etas_parallel,
    calculate_visibility_parallel,
    get_schedule_info,
)
from .session import (
    estimate_session_time,
    find_best_observation_date,
    validate_sequence_for_date,
)
from .types import (
    BestDateResult,
    CombinedWeights,
    ConflictResult,
    ConflictType,
    EtaResult,
    Exposure,
    OptimizationResult,
    OptimizationStrategy,
    ScheduleConflict,
    SessionTimeEstimate,
    Sequence,
    Target,
    TargetScheduleInfo,
    ValidationReport,
)

__all__ = [
    "BestDateResult",
    "CombinedWeights",
    "ConflictResult",
    "ConflictType",
    "EtaResult",
    "Exposure",
    "OptimizationResult",
    "OptimizationStrategy",
    "ScheduleConflict",
    "SessionTimeEstimate",
    "Sequence",
    "Target",
    "TargetScheduleInfo",
    "ValidationReport",
    "apply_optimized_order",
    "calculate_etas_parallel",
    "calculate_visibility_parallel",
    "detect_conflicts",
    "estimate_session_time",
    "estimate_slew_time",
    "find_best_observation_date",
    "get_schedule_info",
    "optimize_sequence",
    "strategy_catalog",
]
