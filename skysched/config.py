from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import tomli as tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:  # Python < 3.11
        import tomli as tomllib

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "skysched" / "config.toml"


class Config:
    def __init__(self, data: dict):
        self._data = data

    def _site_data(self) -> dict:
        return self._data.get("site", {})

    def _schedule_data(self) -> dict:
        return self._data.get("schedule", {})

    @property
    def site_latitude_deg(self):
        return self._site_data().get("latitude_deg", None)

    @property
    def site_longitude_deg(self):
        return self._site_data().get("longitude_deg", None)

    @property
    def site_elevation_m(self):
        return self._site_data().get("elevation_m", 0.0)

    @property
    def site_utc_offset_h(self):
        return self._site_data().get("utc_offset_h", 0.0)

    @property
    def site_name(self):
        return self._site_data().get("name", None)

    @property
    def min_altitude_deg(self):
        return self._schedule_data().get("min_altitude_deg", 20.0)

    @property
    def slew_rate_deg_s(self):
        return self._schedule_data().get("slew_rate_deg_s", 3.0)

    @property
    def settle_time_s(self):
        return self._schedule_data().get("settle_time_s", 5.0)

    @property
    def download_time_s(self):
        return self._schedule_data().get("download_time_s", None)

    @property
    def max_workers(self):
        return self._schedule_data().get("max_workers", None)

    @property
    def parallel_threshold(self):
        return self._schedule_data().get("parallel_threshold", 10)

    @property
    def combined_weights(self) -> dict:
        return dict(self._schedule_data().get("combined_weights", {}))


def load_config(path: Path | None = None) -> Config:
    explicit_path = path
    path = path or DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit_path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")
        # Return default config if default file missing
        return Config({})

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return Config(data)
