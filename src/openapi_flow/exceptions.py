"""Exception hierarchy for openapi-flow.

All exceptions inherit from :class:`FlowError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`openapi_flow.exit_codes`.
The top-level error handler in :func:`openapi_flow.app.main` catches
``FlowError`` and exits with the appropriate code.

Validation findings are never raised: they are collected into a
:class:`~openapi_flow.models.ValidationResult`.  Exceptions are reserved for
problems that stop a run before validation can start.

Subclass hierarchy::

    FlowError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- SpecParseError       (exit 7)
    |   +-- RefResolutionError
    +-- ConfigError          (exit 1)
"""

from openapi_flow.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class FlowError(Exception):
    """Base exception for all openapi-flow errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(FlowError):
    """Raised for invalid CLI arguments, such as an unknown profile name."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(FlowError):
    """Raised when the OpenAPI document cannot be read or parsed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class RefResolutionError(SpecParseError):
    """Raised when a ``$ref`` pointer cannot be followed inside the document.

    The field-reference walker catches this and reports the reference as
    unresolved instead of aborting the run.
    """


class ConfigError(FlowError):
    """Raised for configuration problems (invalid config file, invalid schema contract)."""

    exit_code = EXIT_GENERIC_FAILURE
