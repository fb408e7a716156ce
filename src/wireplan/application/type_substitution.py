"""Application layer - Generic type substitution across inheritance."""

from typing import Dict, Mapping, Optional, Sequence

from wireplan.domain import TypeRef


def build_substitution_map(parameters: Sequence[str], arguments: Sequence[TypeRef]) -> Optional[Dict[str, TypeRef]]:
    """Map a base component's type parameters to the closing arguments a descendant supplies.

    Args:
        parameters: The base component's generic parameter names, in order.
        arguments: The closing type arguments from the descendant's base reference.

    Returns:
        Parameter name to closing type, or None when the arities differ.

    Example:
        >>> build_substitution_map(["T"], [TypeRef.parse("app.User")])
        {'T': TypeRef(name='app.User', args=())}
    """
    if len(parameters) != len(arguments):
        return None
    return dict(zip(parameters, arguments))


def substitute(type_ref: TypeRef, mapping: Mapping[str, TypeRef]) -> TypeRef:
    """Replace generic parameters in ``type_ref`` using ``mapping``, recursing into arguments.

    Args:
        type_ref: The type to substitute.
        mapping: Parameter name to replacement type.

    Returns:
        The substituted type. Unmapped names are returned unchanged.
    """
    if not mapping:
        return type_ref
    if not type_ref.args:
        return mapping.get(type_ref.name, type_ref)
    return TypeRef(
        name=type_ref.name,
        args=tuple(substitute(arg, mapping) for arg in type_ref.args),
    )
