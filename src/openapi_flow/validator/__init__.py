"""Flow validation -- schema contract, state graph analyses, reference checks.

Typical usage::

    from openapi_flow.models import ValidationOptions, ValidationProfile
    from openapi_flow.validator import FlowValidator

    validator = FlowValidator()
    result = validator.validate_source(
        "openapi.yaml",
        ValidationOptions(profile=ValidationProfile.RELAXED),
    )
    if not result.ok:
        print(result.errors)

Sub-modules:

* :mod:`~openapi_flow.validator.schema` -- JSON Schema contract and fix hints.
* :mod:`~openapi_flow.validator.graph` -- state graph builder and analyses.
* :mod:`~openapi_flow.validator.references` -- operation and field references.
* :mod:`~openapi_flow.validator.profiles` -- core/relaxed/strict rules.
* :mod:`~openapi_flow.validator.engine` -- the orchestrator.
"""

from openapi_flow.validator.engine import FlowValidator
from openapi_flow.validator.schema import FlowSchemaValidator, suggest_fixes

__all__ = ["FlowValidator", "FlowSchemaValidator", "suggest_fixes"]
