import pytest

from skysched.astro.types import Coordinates, ObserverLocation
from skysched.errors import InputError


def test_from_decimal_m31():
    c = Coordinates.from_decimal(0.712305, 41.269167)
    assert (c.ra_hours, c.ra_minutes) == (0, 42)
    assert c.ra_seconds == pytest.approx(44.3, abs=0.05)
    assert (c.dec_degrees, c.dec_minutes) == (41, 16)
    assert not c.negative_dec
    assert c.ra_to_decimal() == pytest.approx(0.712305)
    assert c.dec_to_decimal() == pytest.approx(41.269167)


def test_from_decimal_negative_small_dec():
    c = Coordinates.from_decimal(12.0, -0.5)
    assert c.dec_degrees == 0
    assert c.dec_minutes == 30
    assert c.negative_dec
    assert c.dec_to_decimal() == pytest.approx(-0.5)


def test_from_decimal_wraps_ra():
    c = Coordinates.from_decimal(-0.5, 10.0)
    assert c.ra_hours == 23
    assert c.ra_minutes == 30
    assert Coordinates.from_decimal(24.0, 0.0).ra_to_decimal() == pytest.approx(0.0)


def test_from_decimal_rejects_bad_dec():
    with pytest.raises(InputError):
        Coordinates.from_decimal(1.0, 95.0)


def test_ra_to_degrees():
    assert Coordinates(ra_hours=6).ra_to_degrees() == pytest.approx(90.0)


def test_format():
    c = Coordinates(ra_hours=5, ra_minutes=35, ra_seconds=17.3, dec_degrees=5, dec_minutes=23, dec_seconds=28.0, negative_dec=True)
    assert c.format_ra() == "05h 35m 17.3s"
    assert c.format_dec() == "-5° 23' 28.0\""


def test_validate_ok():
    assert Coordinates.from_decimal(0.712305, 41.269167).validate() == []


def test_validate_reports_each_problem():
    errors = Coordinates(ra_hours=25, ra_minutes=61, dec_degrees=91).validate()
    assert "RA hours must be between 0 and 23" in errors
    assert "RA minutes must be between 0 and 59" in errors
    assert "Dec degrees must be between 0 and 90" in errors
    assert "Declination must not exceed 90 degrees" in errors


def test_location_rejects_bad_latitude():
    with pytest.raises(InputError):
        ObserverLocation(latitude_deg=91.0, longitude_deg=0.0)


def test_location_defaults():
    loc = ObserverLocation(latitude_deg=40.7, longitude_deg=-74.0)
    assert loc.elevation_m == 0.0
    assert loc.utc_offset_h == 0.0
    assert loc.name is None
