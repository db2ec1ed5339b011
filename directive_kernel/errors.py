"""
Error taxonomy for directive handling.

Every error is contained at the level of a single directive. ParseError drops
the directive before dispatch; every other DirectiveError becomes a failure
ActionResult carrying its error_kind.
"""

from directive_kernel.models.result import ErrorKind


class DirectiveError(Exception):
    """Base class for errors scoped to one directive."""

    error_kind = ErrorKind.EXTERNAL


class ParseError(DirectiveError):
    """Raised when a directive body has no type or no key:value segments."""

    error_kind = ErrorKind.VALIDATION


class UnsupportedDirectiveError(DirectiveError):
    error_kind = ErrorKind.UNSUPPORTED


class ParamValidationError(DirectiveError):
    """Raised when a required param is missing or malformed."""

    error_kind = ErrorKind.VALIDATION


class ResolutionError(DirectiveError):
    """Raised when no candidate scores above the match threshold."""

    error_kind = ErrorKind.RESOLUTION

    def __init__(self, entity_kind: str, query: str):
        self.entity_kind = entity_kind
        self.query = query
        super().__init__(f"No {entity_kind} matching '{query}'")


class ExternalServiceError(DirectiveError):
    """Raised when a collaborator is missing or reports a failure."""

    error_kind = ErrorKind.EXTERNAL
