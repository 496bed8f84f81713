import datetime

import pytest

from skysched.astro.twilight import dark_window
from skysched.astro.types import ObserverLocation
from skysched.errors import InputError
from skysched.schedule.conflicts import CONFLICT_SUGGESTIONS
from skysched.schedule.optimizer import estimate_slew_time
from skysched.schedule.parallel import get_schedule_info
from skysched.schedule.session import (
    AUTOFOCUS_TIME_S,
    CENTERING_TIME_S,
    estimate_session_time,
    find_best_observation_date,
    validate_sequence_for_date,
)
from skysched.schedule.types import Sequence


def test_validate_counts(messier_sequence, nyc, date):
    report = validate_sequence_for_date(messier_sequence, nyc, date)
    assert report.date == "2024-10-15"
    assert report.total_targets == 5
    assert report.visible_targets == 4
    assert report.has_conflicts
    assert report.conflict_count >= 1
    assert report.recommendations == list(CONFLICT_SUGGESTIONS)

    visible = [i for i in get_schedule_info(messier_sequence, nyc, date) if i.visibility_window.is_visible]
    assert report.average_quality_score == pytest.approx(sum(i.quality_score for i in visible) / 4)
    assert report.total_visibility_hours == pytest.approx(
        sum(i.visibility_window.duration_hours for i in visible)
    )


def test_validate_nothing_visible(make_target, nyc, date):
    seq = Sequence(title="south", targets=[make_target("lmc", 5.392917, -69.756111)])
    report = validate_sequence_for_date(seq, nyc, date)
    assert report.visible_targets == 0
    assert report.average_quality_score == 0.0
    assert report.total_visibility_hours == 0.0


def test_best_date_scores_each_night(messier_sequence, nyc):
    start = datetime.date(2024, 10, 15)
    end = datetime.date(2024, 10, 17)
    result = find_best_observation_date(messier_sequence, nyc, start, end)
    assert [d for d, _ in result.date_scores] == ["2024-10-15", "2024-10-16", "2024-10-17"]
    best = max(score for _, score in result.date_scores)
    assert result.best_score == best
    first_best = next(d for d, score in result.date_scores if score == best)
    assert result.best_date == first_best


def test_best_date_single_day(messier_sequence, nyc, date):
    result = find_best_observation_date(messier_sequence, nyc, date, date)
    assert len(result.date_scores) == 1
    assert result.best_date == "2024-10-15"
    assert result.best_score > 0.0


def test_best_date_nothing_visible(make_target, nyc):
    seq = Sequence(title="south", targets=[make_target("lmc", 5.392917, -69.756111)])
    start = datetime.date(2024, 10, 15)
    result = find_best_observation_date(seq, nyc, start, datetime.date(2024, 10, 16))
    assert result.best_date == "2024-10-15"
    assert result.best_score == 0.0
    assert [score for _, score in result.date_scores] == [0.0, 0.0]


def test_best_date_inverted_range(messier_sequence, nyc):
    with pytest.raises(InputError, match="End date must be after start date"):
        find_best_observation_date(
            messier_sequence, nyc, datetime.date(2024, 10, 17), datetime.date(2024, 10, 15)
        )


def test_session_time_components(make_target, nyc, date):
    seq = Sequence(
        title="session",
        targets=[
            make_target("a", 0.712305, 41.269167, auto_focus_on_start=True, center_target=True),
            make_target("b", 18.893082, 33.029134, center_target=True),
            make_target("c", 16.694898, 36.461319),
        ],
    )
    est = estimate_session_time(seq, nyc, date)
    assert est.imaging_time_seconds == pytest.approx(seq.total_runtime())
    assert est.slew_time_seconds == pytest.approx(estimate_slew_time(seq.targets))
    assert est.autofocus_time_seconds == AUTOFOCUS_TIME_S
    assert est.centering_time_seconds == 2 * CENTERING_TIME_S
    assert est.total_time_seconds == pytest.approx(
        est.imaging_time_seconds
        + est.slew_time_seconds
        + est.autofocus_time_seconds
        + est.centering_time_seconds
    )
    dusk, dawn = dark_window(nyc, date)
    assert est.available_dark_time_seconds == pytest.approx((dawn - dusk).total_seconds())
    assert est.fits_in_night
    assert est.utilization_percentage == pytest.approx(
        est.total_time_seconds / est.available_dark_time_seconds * 100.0
    )


def test_session_time_without_slew(messier_sequence, nyc, date):
    est = estimate_session_time(messier_sequence, nyc, date, include_slew_time=False)
    assert est.slew_time_seconds == 0.0
    assert est.total_time_seconds == pytest.approx(messier_sequence.total_runtime())


def test_session_time_overfull_night(make_target, nyc, date):
    seq = Sequence(title="long", targets=[make_target("m31", 0.712305, 41.269167, exposure_time=3600.0, count=20)])
    est = estimate_session_time(seq, nyc, date)
    assert not est.fits_in_night
    assert est.utilization_percentage == 100.0


def test_session_time_without_darkness(messier_sequence):
    svalbard = ObserverLocation(latitude_deg=78.2, longitude_deg=15.6)
    est = estimate_session_time(messier_sequence, svalbard, datetime.date(2024, 6, 21))
    assert est.available_dark_time_seconds == 0.0
    assert est.utilization_percentage == 0.0
    assert not est.fits_in_night
