"""OpenAPI document parser -- load documents, follow ``$ref`` pointers, extract flows.

This sub-package is the input side of the pipeline: it turns a raw OpenAPI
3.x document (JSON or YAML, local file, remote URL or stdin) into the list of
:class:`~openapi_flow.models.FlowEntry` records the validator consumes.

Typical usage::

    from openapi_flow.parser import load_document, extract_flows

    document = load_document("openapi.yaml")
    entries = extract_flows(document)

Sub-modules:

* :mod:`~openapi_flow.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection.
* :mod:`~openapi_flow.parser.resolver` -- JSON-pointer ``$ref`` resolution
  with a hard depth cap.
* :mod:`~openapi_flow.parser.extractor` -- Walks ``paths`` and collects flow
  fragments and the ``operationId`` index.
"""

from openapi_flow.parser.extractor import collect_operations, extract_flows
from openapi_flow.parser.loader import load_document

__all__ = ["load_document", "extract_flows", "collect_operations"]
