class SkyschedError(Exception):
    """Base exception for skysched errors."""


class InputError(ValueError, SkyschedError):
    """Raised for malformed dates, instants, coordinates or option values."""
