import datetime

import pytest

from skysched.astro.visibility import compute_visibility_window
from skysched.schedule.parallel import (
    NOT_VISIBLE_NOTE,
    calculate_etas_parallel,
    calculate_visibility_parallel,
    get_schedule_info,
)
from skysched.schedule.types import Sequence

UTC = datetime.timezone.utc
START = datetime.datetime(2024, 10, 15, 23, 0, tzinfo=UTC)


def test_etas_are_back_to_back(messier_sequence):
    etas = calculate_etas_parallel(messier_sequence, START)
    assert [e.target_id for e in etas] == [t.id for t in messier_sequence.targets]
    assert etas[0].eta_start == START
    for eta in etas:
        assert eta.runtime == pytest.approx(10 * 305.0)
        assert eta.eta_end == eta.eta_start + datetime.timedelta(seconds=eta.runtime)
    for prev, curr in zip(etas, etas[1:]):
        assert curr.eta_start == prev.eta_end
        assert curr.eta_start > prev.eta_start


def test_parallel_etas_match_sequential(make_target):
    seq = Sequence(
        title="many",
        targets=[make_target(f"t{i:02d}", i % 24, 10.0, exposure_time=float(30 + i), count=i + 1) for i in range(15)],
        estimated_download_time=2.0,
    )
    sequential = calculate_etas_parallel(seq, START, threshold=100)
    fanned_out = calculate_etas_parallel(seq, START, threshold=0, max_workers=4)
    assert fanned_out == sequential


def test_etas_for_empty_sequence():
    assert calculate_etas_parallel(Sequence(title="empty"), START) == []
    assert calculate_etas_parallel(Sequence(title="empty"), START, threshold=-1) == []


def test_schedule_info_centres_on_peak(messier_sequence, nyc, date):
    infos = get_schedule_info(messier_sequence, nyc, date)
    assert [i.target_id for i in infos] == ["m31", "m42", "m13", "m57", "lmc"]
    runtime = datetime.timedelta(seconds=10 * 305.0)
    for info in infos[:4]:
        window = info.visibility_window
        assert window.is_visible
        assert info.optimal_start_time == window.max_altitude_time - runtime / 2
        assert info.optimal_end_time - info.optimal_start_time == runtime
        assert 0.0 <= info.quality_score <= 100.0
        assert NOT_VISIBLE_NOTE not in info.notes


def test_schedule_info_for_invisible_target(messier_sequence, nyc, date):
    lmc = get_schedule_info(messier_sequence, nyc, date)[-1]
    assert lmc.target_name == "LMC"
    assert not lmc.visibility_window.is_visible
    assert lmc.optimal_start_time is None
    assert lmc.optimal_end_time is None
    assert lmc.quality_score == 0.0
    assert lmc.notes == [NOT_VISIBLE_NOTE]


def test_visibility_parallel_preserves_order(make_target, nyc, date):
    targets = [make_target(f"t{i:02d}", (i * 2.1) % 24, -40.0 + i * 5.0) for i in range(18)]
    results = calculate_visibility_parallel(targets, nyc, date, 20.0, max_workers=4)
    assert [tid for tid, _ in results] == [t.id for t in targets]
    for target, (_, window) in zip(targets, results):
        assert window == compute_visibility_window(target.coordinates, nyc, date, 20.0)
