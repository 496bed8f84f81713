import datetime

import pytest

from skysched.astro.types import Coordinates, ObserverLocation
from skysched.astro.visibility import (
    altitude_curve,
    compute_visibility_window,
    is_visible_at,
    visibility_range,
)
from skysched.errors import InputError

UTC = datetime.timezone.utc
DATE = datetime.date(2024, 10, 15)
MIDNIGHT = datetime.datetime(2024, 10, 15, tzinfo=UTC)


@pytest.fixture
def nyc():
    return ObserverLocation(latitude_deg=40.7, longitude_deg=-74.0)


@pytest.fixture
def m31():
    return Coordinates.from_decimal(0.712305, 41.269167)


def test_m31_visible_from_new_york(nyc, m31):
    w = compute_visibility_window(m31, nyc, DATE, 20.0)
    assert w.is_visible
    assert w.max_altitude > 20.0
    assert w.max_altitude > 80.0
    assert w.start_time < w.end_time
    assert w.duration_hours == pytest.approx((w.end_time - w.start_time).total_seconds() / 3600.0)
    assert MIDNIGHT <= w.max_altitude_time <= MIDNIGHT + datetime.timedelta(days=1)


def test_window_edges_on_ten_minute_grid(nyc, m31):
    w = compute_visibility_window(m31, nyc, DATE, 20.0)
    for edge in (w.start_time, w.end_time, w.max_altitude_time):
        offset = (edge - MIDNIGHT).total_seconds()
        assert offset % 600 == pytest.approx(0.0, abs=1.0) or offset % 600 == pytest.approx(600.0, abs=1.0)


def test_far_southern_target_never_visible(nyc):
    w = compute_visibility_window(Coordinates.from_decimal(5.39, -70.0), nyc, DATE, 20.0)
    assert not w.is_visible
    assert w.duration_hours == 0.0
    assert w.start_time == MIDNIGHT
    assert w.end_time == MIDNIGHT
    assert w.max_altitude < 0.0


def test_circumpolar_target_spans_whole_day(nyc):
    w = compute_visibility_window(Coordinates.from_decimal(2.5, 89.0), nyc, DATE, 20.0)
    assert w.is_visible
    assert w.start_time == MIDNIGHT
    assert w.end_time == MIDNIGHT + datetime.timedelta(days=1)
    assert w.duration_hours == pytest.approx(24.0)


def test_zero_threshold_window_is_shorter_than_day(nyc, m31):
    w = compute_visibility_window(Coordinates.from_decimal(6.0, 0.0), nyc, DATE, 0.0)
    assert w.is_visible
    assert 0.0 < w.duration_hours <= 24.0


def test_visibility_range(nyc, m31):
    windows = visibility_range(m31, nyc, DATE, DATE + datetime.timedelta(days=2), 20.0)
    assert len(windows) == 3
    assert all(w.is_visible for w in windows)
    assert windows[1].start_time.date() == datetime.date(2024, 10, 16)


def test_visibility_range_inverted(nyc, m31):
    with pytest.raises(InputError):
        visibility_range(m31, nyc, DATE, DATE - datetime.timedelta(days=1), 20.0)


def test_altitude_curve(nyc, m31):
    curve = altitude_curve(m31, nyc, DATE, 10)
    assert len(curve) == 145
    assert curve[0][0] == MIDNIGHT
    assert curve[-1][0] == MIDNIGHT + datetime.timedelta(days=1)
    peak = max(alt for _, alt, _ in curve)
    assert peak == pytest.approx(compute_visibility_window(m31, nyc, DATE, 20.0).max_altitude, abs=1e-6)


def test_altitude_curve_interval_floor(nyc, m31):
    assert len(altitude_curve(m31, nyc, DATE, 0)) == 24 * 60 + 1


def test_is_visible_at(nyc):
    instant = datetime.datetime(2024, 10, 16, 3, tzinfo=UTC)
    assert is_visible_at(Coordinates.from_decimal(2.5, 89.0), nyc, instant, 20.0)
    assert not is_visible_at(Coordinates.from_decimal(5.39, -70.0), nyc, instant, 20.0)
