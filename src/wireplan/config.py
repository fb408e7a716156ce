"""Configuration management for wireplan.

Settings load from environment variables prefixed with ``WIREPLAN_`` (and an
optional ``.env`` file), for example::

    WIREPLAN_NAMING_CONVENTION=snake_case
    WIREPLAN_PARAMETER_PREFIX=
    WIREPLAN_SEVERITY_OVERRIDES='{"redundancy_warning": "info"}'
"""

from functools import lru_cache
from typing import Dict, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wireplan.domain.enums import FindingKind, NamingConvention, Severity

# Kinds whose findings can be fatal keep their error severity.
_FATAL_CAPABLE_KINDS = frozenset(
    {
        FindingKind.STRUCTURAL_ERROR,
        FindingKind.LIFETIME_VIOLATION,
        FindingKind.CONDITION_CONTRADICTION,
    }
)


class AnalysisSettings(BaseSettings):
    """Analysis settings loaded from environment variables.

    Attributes:
        naming_convention: Default casing for derived parameter names.
        parameter_prefix: Default prefix for derived parameter names.
        strip_interface_marker: Default for stripping a leading ``I`` marker.
        collection_types: Simple names of wrappers whose element type names and
            resolves a dependency (``Iterable[IHandler]`` resolves to every handler).
        configuration_type: Type of the configuration source parameter that
            configuration-bound members are read from.
        options_types: Simple names of options wrappers (``IOptions[DbSettings]``),
            injected as ordinary constructor parameters.
        direct_value_types: Simple names of scalar types read from a single key.
        lifetime_validation_enabled: Run lifetime compatibility checks.
        severity_overrides: Reported severity per finding kind. Only applied to
            non-fatal findings.
        log_level: Log level for wireplan loggers.
        log_json: Render logs as JSON instead of console lines.
    """

    model_config = SettingsConfigDict(
        env_prefix="WIREPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    naming_convention: NamingConvention = Field(default=NamingConvention.CAMEL_CASE)
    parameter_prefix: str = Field(default="_")
    strip_interface_marker: bool = Field(default=True)
    collection_types: Tuple[str, ...] = Field(
        default=(
            "Iterable",
            "Sequence",
            "Collection",
            "List",
            "list",
            "Tuple",
            "tuple",
            "FrozenSet",
            "frozenset",
            "IEnumerable",
            "IList",
            "ICollection",
            "IReadOnlyList",
            "IReadOnlyCollection",
        ),
    )
    configuration_type: str = Field(default="IConfiguration", min_length=1)
    options_types: Tuple[str, ...] = Field(default=("IOptions", "IOptionsSnapshot", "IOptionsMonitor"))
    direct_value_types: Tuple[str, ...] = Field(
        default=(
            "str",
            "int",
            "float",
            "bool",
            "bytes",
            "Decimal",
            "date",
            "datetime",
            "timedelta",
            "UUID",
            "Path",
        ),
    )
    lifetime_validation_enabled: bool = Field(default=True)
    severity_overrides: Dict[FindingKind, Severity] = Field(default_factory=dict)
    log_level: str = Field(default="WARNING")
    log_json: bool = Field(default=False)

    @field_validator("severity_overrides")
    @classmethod
    def reject_fatal_kinds(cls, value: Dict[FindingKind, Severity]) -> Dict[FindingKind, Severity]:
        """Fatal-capable kinds keep their severity."""
        fatal = sorted(str(kind) for kind in value if kind in _FATAL_CAPABLE_KINDS)
        if fatal:
            raise ValueError(f"Severity of fatal-capable finding kinds cannot be overridden: {', '.join(fatal)}")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> AnalysisSettings:
    """Get cached settings instance."""
    return AnalysisSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
