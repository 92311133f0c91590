"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific outcome and is referenced by the
corresponding :class:`~openapi_flow.exceptions.FlowError` subclass or by the
commands that report a validation verdict.  CI scripts can inspect the exit
code to tell a failed validation apart from a document that could not be
read at all.

Example::

    $ openapi-flow validate openapi.yaml
    $ echo $?
    3   # EXIT_VALIDATION_FAILED -- the flow graph has errors
"""

EXIT_SUCCESS = 0
"""The command completed successfully and every check passed."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or options."""

EXIT_VALIDATION_FAILED = 3
"""The document was read, but validation or lint reported errors."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be read or parsed."""
