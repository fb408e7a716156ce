"""Application layer - Parameter name derivation."""

import keyword
import re
from typing import Collection, Tuple

from wireplan.config import AnalysisSettings
from wireplan.domain import NamingConvention, NamingOptions, TypeRef

_INTERFACE_MARKER = re.compile(r"^I(?=[A-Z])")
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def semantic_name(type_ref: TypeRef, collection_types: Collection[str] = ()) -> str:
    """Return the name a parameter of ``type_ref`` is derived from.

    Collection wrappers name by their element type, so ``Iterable[IHandler]``
    yields ``IHandler``.
    """
    while type_ref.simple_name in collection_types and len(type_ref.args) == 1:
        type_ref = type_ref.args[0]
    return type_ref.simple_name


def apply_convention(name: str, convention: NamingConvention) -> str:
    """Apply a casing convention to a PascalCase type name."""
    if not name:
        return name
    if convention == NamingConvention.PASCAL_CASE:
        return name[0].upper() + name[1:]
    if convention == NamingConvention.SNAKE_CASE:
        return _WORD_BOUNDARY.sub("_", name).lower()
    return name[0].lower() + name[1:]


def derive_parameter_name(
    type_ref: TypeRef,
    convention: NamingConvention = NamingConvention.CAMEL_CASE,
    prefix: str = "",
    strip_interface_marker: bool = True,
    collection_types: Collection[str] = (),
) -> str:
    """Derive a parameter name from a dependency type.

    Pure function of its arguments: take the semantic name, optionally strip a
    leading single-letter ``I`` marker, apply the casing convention, then prepend
    the prefix. A result that is a reserved keyword gets a trailing underscore.

    Args:
        type_ref: The resolved dependency type.
        convention: Casing convention.
        prefix: Text prepended to the cased name.
        strip_interface_marker: Strip ``I`` when followed by an uppercase letter.
        collection_types: Simple names of collection wrappers.

    Returns:
        The derived name.

    Example:
        >>> derive_parameter_name(TypeRef.parse("app.IUserRepository"), prefix="_")
        '_userRepository'
        >>> derive_parameter_name(TypeRef.parse("app.IUserRepository"), NamingConvention.SNAKE_CASE)
        'user_repository'
        >>> derive_parameter_name(TypeRef.parse("app.Class"))
        'class_'
    """
    base = semantic_name(type_ref, collection_types)
    if strip_interface_marker:
        base = _INTERFACE_MARKER.sub("", base)
    name = prefix + apply_convention(base, convention)
    if keyword.iskeyword(name):
        name += "_"
    return name


def resolve_naming(options: NamingOptions, settings: AnalysisSettings) -> Tuple[NamingConvention, str, bool]:
    """Fill unset naming options from settings defaults."""
    convention = options.convention if options.convention is not None else settings.naming_convention
    prefix = options.prefix if options.prefix is not None else settings.parameter_prefix
    strip = (
        options.strip_interface_marker
        if options.strip_interface_marker is not None
        else settings.strip_interface_marker
    )
    return convention, prefix, strip
