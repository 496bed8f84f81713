import datetime

import pytest

from skysched.astro.types import Coordinates, ObserverLocation
from skysched.schedule.types import Exposure, Sequence, Target


def _make_target(target_id, ra_hours, dec_deg, *, exposure_time=300.0, count=10, **kwargs):
    return Target(
        id=target_id,
        name=kwargs.pop("name", target_id.upper()),
        coordinates=Coordinates.from_decimal(ra_hours, dec_deg),
        exposures=[Exposure(exposure_time=exposure_time, total_count=count)],
        **kwargs,
    )


@pytest.fixture
def make_target():
    return _make_target


@pytest.fixture
def nyc():
    return ObserverLocation(latitude_deg=40.7, longitude_deg=-74.0, utc_offset_h=-4.0)


@pytest.fixture
def date():
    return datetime.date(2024, 10, 15)


@pytest.fixture
def messier_sequence():
    return Sequence(
        title="Autumn",
        targets=[
            _make_target("m31", 0.712305, 41.269167),
            _make_target("m42", 5.588139, -5.391111),
            _make_target("m13", 16.694898, 36.461319),
            _make_target("m57", 18.893082, 33.029134),
            _make_target("lmc", 5.392917, -69.756111),
        ],
    )
