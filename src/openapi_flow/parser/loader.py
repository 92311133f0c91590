"""Read an OpenAPI document from a file, an http(s) URL or stdin.

This is the only module that does I/O on the document.  Everything after
:func:`load_document` works on the returned mapping.

The format is taken from the file extension (``.json``, ``.yaml``,
``.yml``) or the response ``Content-Type``.  When neither says, the text is
tried as JSON and then as YAML.  YAML is read with ``safe_load``, so
unquoted status codes such as ``200:`` stay integers; the field-reference
checks look responses up by both forms.

Every failure raises :class:`~openapi_flow.exceptions.SpecParseError`
(exit code 7) naming the source, and no validation is attempted.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from openapi_flow.exceptions import SpecParseError
from openapi_flow.output import debug

STDIN_SOURCE = "-"
URL_TIMEOUT = 30.0

_SUFFIX_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_document(source: str) -> dict[str, Any]:
    """Load and parse the document named by *source*.

    Args:
        source: A file path, an ``http://``/``https://`` URL, or ``-`` for
            stdin.

    Raises:
        SpecParseError: If the document cannot be read, is not JSON/YAML,
            or is not a mapping at the top level.
    """
    if source == STDIN_SOURCE:
        text, fmt = _read_stdin(), None
    elif source.startswith(("http://", "https://")):
        text, fmt = _fetch(source)
    else:
        text, fmt = _read_file(source)

    if not text.strip():
        raise SpecParseError(f"OpenAPI document is empty: {_label(source)}")

    debug(f"Parsing {_label(source)} as {fmt or 'JSON or YAML'}")
    return parse_document(text, fmt, origin=_label(source))


def _label(source: str) -> str:
    return "stdin" if source == STDIN_SOURCE else source


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Could not read stdin: {exc}") from exc


def _read_file(path: str) -> tuple[str, Optional[str]]:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"OpenAPI file not found: {path}")
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Could not read {path}: {exc}") from exc
    return text, _SUFFIX_FORMATS.get(file_path.suffix.lower())


def _fetch(url: str) -> tuple[str, Optional[str]]:
    debug(f"GET {url}")
    try:
        response = httpx.get(url, timeout=URL_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(f"HTTP {exc.response.status_code} fetching {url}") from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Could not fetch {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "").lower()
    fmt: Optional[str] = None
    if "json" in content_type:
        fmt = "json"
    elif "yaml" in content_type or "yml" in content_type:
        fmt = "yaml"
    return response.text, fmt


def parse_document(text: str, fmt: Optional[str] = None, origin: str = "document") -> dict[str, Any]:
    """Parse *text* as ``"json"``, ``"yaml"``, or either when *fmt* is ``None``.

    JSON is tried first when the format is unknown because its errors point
    at the exact character, which YAML's do not for JSON-looking input.

    Raises:
        SpecParseError: If the text does not parse, or the top level is not
            a mapping.
    """
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SpecParseError(f"{origin} is not valid JSON: {exc}") from exc
    elif fmt == "yaml":
        data = _load_yaml(text, origin)
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as json_exc:
            try:
                data = _load_yaml(text, origin)
            except SpecParseError as yaml_exc:
                raise SpecParseError(
                    f"{origin} is neither JSON nor YAML\n"
                    f"  JSON: {json_exc}\n"
                    f"  YAML: {yaml_exc.__cause__}"
                ) from yaml_exc

    if not isinstance(data, dict):
        kind = "nothing" if data is None else type(data).__name__
        raise SpecParseError(f"{origin} must contain a mapping at the top level, got {kind}")
    return data


def _load_yaml(text: str, origin: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecParseError(f"{origin} is not valid YAML: {exc}") from exc
