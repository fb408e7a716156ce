"""Application layer - Configuration binding resolution."""

from wireplan.config import AnalysisSettings
from wireplan.domain import ConfigBindingMode, ConfigurationBinding, DependencySpec, TypeRef

_SECTION_SUFFIXES = ("Settings", "Configuration", "Config", "Options", "Object")


def binding_mode(type_ref: TypeRef, settings: AnalysisSettings) -> ConfigBindingMode:
    """Infer how a configuration-bound member of ``type_ref`` is bound.

    Options wrappers with one argument are injected as parameters, scalar types
    are read from a single key, and everything else binds a whole section.
    """
    if type_ref.simple_name in settings.options_types and len(type_ref.args) == 1:
        return ConfigBindingMode.OPTIONS
    if type_ref.simple_name in settings.direct_value_types and not type_ref.args:
        return ConfigBindingMode.DIRECT_VALUE
    return ConfigBindingMode.SECTION


def infer_section_name(type_ref: TypeRef, settings: AnalysisSettings) -> str:
    """Infer a section name from a bound type by dropping a conventional suffix.

    Example:
        >>> infer_section_name(TypeRef.parse("app.DatabaseSettings"), AnalysisSettings())
        'Database'
        >>> infer_section_name(TypeRef.parse("IOptions[app.SmtpOptions]"), AnalysisSettings())
        'Smtp'
    """
    if binding_mode(type_ref, settings) == ConfigBindingMode.OPTIONS:
        type_ref = type_ref.args[0]
    name = type_ref.simple_name
    for suffix in _SECTION_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def resolve_binding(
    identity: str,
    spec: DependencySpec,
    mode: ConfigBindingMode,
    settings: AnalysisSettings,
) -> ConfigurationBinding:
    """Build the binding a configuration-bound declaration assigns in the constructor body.

    Args:
        identity: Identity of the declaring component.
        spec: The configuration-bound declaration.
        mode: ``DIRECT_VALUE`` or ``SECTION``.
        settings: Analysis settings, for section name inference.
    """
    source = spec.configuration
    key = source.key.strip() if source.key and source.key.strip() else infer_section_name(spec.type_ref, settings)
    return ConfigurationBinding(
        member_name=spec.member_name,
        type_ref=spec.type_ref,
        key=key,
        mode=mode,
        required=source.required and source.default is None,
        default=source.default,
        declared_by=identity,
    )
