import datetime

import pytest

from skysched.astro.ephemeris import sun_position
from skysched.astro.timescale import greenwich_sidereal_time, to_julian_day
from skysched.astro.transform import angular_separation_deg

UTC = datetime.timezone.utc


@pytest.mark.integration
def test_gmst_matches_astropy():
    astropy_time = pytest.importorskip("astropy.time")
    dt = datetime.datetime(2024, 10, 15, 22, tzinfo=UTC)
    t = astropy_time.Time(dt, scale="utc")
    expected = t.sidereal_time("mean", "greenwich").deg
    diff = (greenwich_sidereal_time(to_julian_day(dt)) - expected) % 360.0
    assert min(diff, 360.0 - diff) < 0.01


@pytest.mark.integration
def test_sun_matches_astropy():
    coordinates = pytest.importorskip("astropy.coordinates")
    astropy_time = pytest.importorskip("astropy.time")
    dt = datetime.datetime(2024, 10, 15, 22, tzinfo=UTC)
    sun = coordinates.get_sun(astropy_time.Time(dt, scale="utc"))
    ra, dec = sun_position(to_julian_day(dt))
    # Analytic position is of date; astropy reports GCRS, so allow for precession.
    sep = angular_separation_deg(ra, dec, sun.ra.hour, sun.dec.deg)
    assert sep < 0.5
