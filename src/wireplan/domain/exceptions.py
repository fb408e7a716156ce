from typing import Optional


class WireplanException(Exception):
    """Base exception for wireplan errors.

    Analysis problems are reported as findings, never raised. Exceptions are
    reserved for callers that hand the engine malformed input.
    """


class CatalogError(WireplanException):
    """Raised when a type catalog breaks its contract.

    This occurs when two components share the same identity.

    Attributes:
        identity: The offending component identity.
        reason: Optional reason for the failure.
    """

    def __init__(self, identity: str, reason: Optional[str] = None) -> None:
        self.identity = identity
        self.reason = reason
        message = f"Invalid catalog entry: {identity!r}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class TypeRefSyntaxError(WireplanException):
    """Raised when a type reference cannot be parsed from text.

    Attributes:
        text: The text that failed to parse.
        position: Character offset where parsing stopped.
    """

    def __init__(self, text: str, position: int) -> None:
        self.text = text
        self.position = position
        super().__init__(f"Malformed type reference {text!r} at position {position}")
