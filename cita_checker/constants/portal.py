"""Target portal constants."""

from typing import Final

PORTAL_URL: Final[str] = "https://sedeclave.dgt.gob.es/WEB_CITE_CONSULTA/paginas/inicio.faces"

# Jefatura / office option value
DEFAULT_OFFICE_CODE: Final[str] = "587"
# Area option value (CYV = Conductores y Vehiculos)
DEFAULT_AREA_CODE: Final[str] = "CYV"


class Messages:
    """Notification texts."""

    AVAILABLE: Final[str] = "¡Citas disponibles!"
    UNAVAILABLE: Final[str] = "No hay citas disponibles"
    ERROR_PREFIX: Final[str] = "Error"


class Artifacts:
    """Diagnostic artifact locations, relative to the working directory."""

    DIR: Final[str] = "artifacts"
    LOG_FILE: Final[str] = "diagnostics.log"


class ExitCodes:
    """Process exit statuses."""

    OK: Final[int] = 0
    FAILURE: Final[int] = 1
    CONFIGURATION: Final[int] = 2
