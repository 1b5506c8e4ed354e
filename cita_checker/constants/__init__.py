"""Constants for Cita-Checker.

All classes and constants can be imported directly from this package:
    from cita_checker.constants import Timeouts, Messages, PORTAL_URL
"""

from .portal import (
    DEFAULT_AREA_CODE,
    DEFAULT_OFFICE_CODE,
    PORTAL_URL,
    Artifacts,
    ExitCodes,
    Messages,
)
from .timing import Delays, Timeouts

__all__ = [
    "DEFAULT_AREA_CODE",
    "DEFAULT_OFFICE_CODE",
    "PORTAL_URL",
    "Artifacts",
    "Delays",
    "ExitCodes",
    "Messages",
    "Timeouts",
]
