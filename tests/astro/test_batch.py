import datetime

import pytest

from skysched.astro.batch import evaluate_batch, find_optimal_instant
from skysched.astro.timescale import to_julian_day
from skysched.astro.transform import equatorial_to_horizontal
from skysched.astro.twilight import dark_window
from skysched.astro.types import Coordinates, ObserverLocation

UTC = datetime.timezone.utc
DATE = datetime.date(2024, 10, 15)
INSTANT = datetime.datetime(2024, 10, 16, 3, tzinfo=UTC)


@pytest.fixture
def nyc():
    return ObserverLocation(latitude_deg=40.7, longitude_deg=-74.0)


@pytest.fixture
def many_targets():
    return [
        (f"t{i:02d}", Coordinates.from_decimal((i * 1.7) % 24.0, -80.0 + i * 6.5))
        for i in range(25)
    ]


def test_evaluate_batch_preserves_order(nyc, many_targets):
    results = evaluate_batch(many_targets, nyc, INSTANT, 20.0)
    assert [r.id for r in results] == [tid for tid, _ in many_targets]


def test_parallel_matches_inline(nyc, many_targets):
    fanned_out = evaluate_batch(many_targets, nyc, INSTANT, 20.0, max_workers=4)
    inline = evaluate_batch(many_targets, nyc, INSTANT, 20.0, max_workers=1)
    assert fanned_out == inline


def test_batch_fields(nyc, many_targets):
    jd = to_julian_day(INSTANT)
    for (tid, coords), r in zip(many_targets, evaluate_batch(many_targets, nyc, INSTANT, 20.0)):
        alt, az = equatorial_to_horizontal(
            coords.ra_to_decimal(), coords.dec_to_decimal(), nyc.latitude_deg, nyc.longitude_deg, jd
        )
        assert r.altitude == pytest.approx(alt)
        assert r.azimuth == pytest.approx(az)
        assert r.is_visible == (alt >= 20.0)
        assert (r.air_mass is None) == (alt <= 0.0)
        assert -180.0 < r.hour_angle <= 180.0


def test_evaluate_batch_empty(nyc):
    assert evaluate_batch([], nyc, INSTANT, 20.0) == []


def test_find_optimal_instant_m31(nyc):
    m31 = Coordinates.from_decimal(0.712305, 41.269167)
    best = find_optimal_instant(m31, nyc, DATE, 20.0)
    assert best is not None
    start, end = dark_window(nyc, DATE)
    assert start <= best < end
    alt, _ = equatorial_to_horizontal(0.712305, 41.269167, 40.7, -74.0, to_julian_day(best))
    assert alt >= 20.0


def test_find_optimal_instant_never_high_enough(nyc):
    assert find_optimal_instant(Coordinates.from_decimal(5.39, -70.0), nyc, DATE, 20.0) is None


def test_find_optimal_instant_without_darkness():
    svalbard = ObserverLocation(latitude_deg=78.2, longitude_deg=15.6)
    polaris = Coordinates.from_decimal(2.53, 89.26)
    assert find_optimal_instant(polaris, svalbard, datetime.date(2024, 6, 21), 20.0) is None
