import datetime

import pytest

from skysched.astro.timescale import local_sidereal_time, to_julian_day
from skysched.astro.transform import (
    air_mass,
    angular_separation,
    angular_separation_deg,
    equatorial_to_horizontal,
    hour_angle,
)
from skysched.astro.types import Coordinates

UTC = datetime.timezone.utc
LAT = 40.0
LON = -74.0


@pytest.fixture
def jd():
    return to_julian_day(datetime.datetime(2024, 10, 15, 22, tzinfo=UTC))


def _ra_at_hour_angle(jd, ha_deg):
    return ((local_sidereal_time(jd, LON) - ha_deg) % 360.0) / 15.0


def test_pole_altitude_equals_latitude(jd):
    alt, _ = equatorial_to_horizontal(3.0, 90.0, LAT, LON, jd)
    assert alt == pytest.approx(LAT, abs=1e-6)


def test_meridian_transit_due_south(jd):
    alt, az = equatorial_to_horizontal(_ra_at_hour_angle(jd, 0.0), 0.0, LAT, LON, jd)
    assert alt == pytest.approx(90.0 - LAT, abs=1e-6)
    assert az == pytest.approx(180.0, abs=1e-3)


def test_rising_in_east(jd):
    alt, az = equatorial_to_horizontal(_ra_at_hour_angle(jd, -90.0), 0.0, LAT, LON, jd)
    assert alt == pytest.approx(0.0, abs=1e-6)
    assert az == pytest.approx(90.0, abs=1e-3)


def test_setting_in_west(jd):
    alt, az = equatorial_to_horizontal(_ra_at_hour_angle(jd, 90.0), 0.0, LAT, LON, jd)
    assert alt == pytest.approx(0.0, abs=1e-6)
    assert az == pytest.approx(270.0, abs=1e-3)


def test_zenith_stays_finite(jd):
    alt, az = equatorial_to_horizontal(_ra_at_hour_angle(jd, 0.0), LAT, LAT, LON, jd)
    assert alt == pytest.approx(90.0, abs=1e-6)
    assert 0.0 <= az <= 360.0


def test_altitude_always_in_range(jd):
    for ra in (0.0, 5.5, 12.0, 18.25, 23.99):
        for dec in (-89.0, -30.0, 0.0, 45.0, 89.0):
            alt, az = equatorial_to_horizontal(ra, dec, LAT, LON, jd)
            assert -90.0 <= alt <= 90.0
            assert 0.0 <= az <= 360.0


def test_hour_angle_range(jd):
    for ra in (0.0, 6.0, 12.0, 18.0, 23.9):
        ha = hour_angle(ra, LON, jd)
        assert -180.0 < ha <= 180.0


def test_hour_angle_on_meridian(jd):
    assert hour_angle(_ra_at_hour_angle(jd, 30.0), LON, jd) == pytest.approx(30.0, abs=1e-6)


def test_air_mass_zenith():
    assert air_mass(90.0) == pytest.approx(1.0, abs=1e-3)


def test_air_mass_thirty_degrees():
    assert air_mass(30.0) == pytest.approx(2.0, abs=0.01)


def test_air_mass_forty_five_degrees():
    am = air_mass(45.0)
    assert 1.0 < am < 2.0
    assert am == pytest.approx(1.414, abs=0.01)


def test_air_mass_below_horizon_absent():
    assert air_mass(0.0) is None
    assert air_mass(-5.0) is None


def test_air_mass_grows_toward_horizon():
    assert air_mass(10.0) > air_mass(30.0) > air_mass(60.0)


def test_angular_separation_deg():
    assert angular_separation_deg(1.0, 20.0, 1.0, 20.0) == pytest.approx(0.0, abs=1e-6)
    assert angular_separation_deg(0.0, 0.0, 6.0, 0.0) == pytest.approx(90.0)
    assert angular_separation_deg(0.0, 90.0, 12.0, -90.0) == pytest.approx(180.0)


def test_angular_separation_symmetric():
    a = Coordinates.from_decimal(0.712305, 41.269167)
    b = Coordinates.from_decimal(5.588, -5.39)
    assert angular_separation(a, b) == pytest.approx(angular_separation(b, a))
    assert 0.0 <= angular_separation(a, b) <= 180.0
