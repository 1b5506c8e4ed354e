"""Form selector table for the appointment portal."""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from loguru import logger

from cita_checker.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class FormSelectorSet:
    """
    Locator expressions for every element the workflow touches.

    The portal is a JSF/PrimeFaces form, so ids contain ``:`` which must be
    escaped in CSS. A portal redesign only requires updating this table (or
    overriding it from YAML).

    ``procedure_type`` is reserved: the portal preselects the procedure type
    for the office, so the workflow never touches it. It stays in the table so
    override files written for the full form keep loading.
    """

    office: str = "#formselectorCentro\\:j_id_2h"
    # Reserved, not read by the workflow
    procedure_type: str = "#formselectorCentro\\:idTipoTramiteSelector"
    area: str = "#formselectorCentro\\:idAreaSelector"
    submit: str = "#formselectorCentro\\:j_id_2x"
    procedure_confirmation: str = "#seleccionarTramitea_264"
    appointment_section: str = "#formcita\\:seccionCentro"
    calendar: str = "#formcita\\:calendarioJefatura"

    @classmethod
    def role_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    def as_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in self.role_names()}

    @classmethod
    def from_mapping(cls, overrides: Dict[str, Any]) -> "FormSelectorSet":
        """
        Build a selector set from defaults plus overrides.

        Raises:
            ConfigurationError: On unknown roles or non-string selectors
        """
        unknown = sorted(set(overrides) - set(cls.role_names()))
        if unknown:
            raise ConfigurationError(f"Unknown selector roles: {', '.join(unknown)}")

        for role, value in overrides.items():
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"Selector '{role}' must be a non-empty string")

        return replace(cls(), **overrides)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "FormSelectorSet":
        """
        Load selector overrides from a YAML file.

        The file may contain the roles at top level or under a ``selectors`` key.
        """
        selectors_file = Path(path)
        if not selectors_file.exists():
            raise ConfigurationError(f"Selectors file not found: {selectors_file}")

        try:
            with open(selectors_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid selectors file {selectors_file}: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("selectors"), dict):
            data = data["selectors"]
        if not isinstance(data, dict):
            raise ConfigurationError(f"Selectors file {selectors_file} must contain a mapping")

        selector_set = cls.from_mapping(data)
        logger.info(f"Selectors loaded from {selectors_file} ({len(data)} override(s))")
        return selector_set

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "FormSelectorSet":
        """Return the default table, or the table overridden by ``path``."""
        if path is None:
            return cls()
        return cls.from_yaml(path)
