"""Terminal output for openapi-flow.

A command writes to two channels:

* the **report** on stdout: JSON results, Mermaid diagrams and finding
  tables.  This is what CI jobs capture and pipe into other tools, so
  nothing else is ever written there.
* **diagnostics** on stderr: progress lines, pass/fail verdicts, fix hints,
  warnings, errors and ``--verbose`` debug traces.

Tables and JSON are styled only when stdout is a terminal and colour is not
turned off by ``--no-color``, ``NO_COLOR`` (any value) or ``TERM=dumb``.
Messages are rendered as literal text: state names, field references and
file paths are never interpreted as Rich markup.

:func:`~openapi_flow.app.main_callback` installs one :class:`OutputManager`
per run with :func:`set_output`; everything else calls the module-level
helpers (:func:`info`, :func:`error`, :func:`emit_json`, ...).
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


def color_disabled_by_env() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _stdout_is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


class OutputManager:
    """Writes the report to stdout and diagnostics to stderr.

    Args:
        plain: Force unstyled report output.  ``None`` picks plain output
            whenever stdout is not a terminal or colour is disabled.
        no_color: Disable colour on both channels.
        quiet: Drop ``info``, ``success`` and ``hint`` messages.  Warnings,
            errors and the report itself are always written.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        plain: Optional[bool] = None,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self.no_color = no_color or color_disabled_by_env()
        self.plain = plain if plain is not None else (self.no_color or not _stdout_is_tty())
        self.quiet = quiet
        self.verbose = verbose

        self._report = Console(
            file=sys.stdout,
            no_color=self.no_color,
            force_terminal=not self.plain,
            highlight=False,
        )
        self._diagnostics = Console(
            file=sys.stderr,
            no_color=self.no_color,
            stderr=True,
            highlight=False,
        )

    # -- report (stdout) ------------------------------------------------ #

    def emit(self, text: str) -> None:
        """Write *text* to stdout unchanged, e.g. a Mermaid diagram."""
        sys.stdout.write(text + "\n")
        sys.stdout.flush()

    def emit_json(self, data: Any) -> None:
        """Write *data* as indented JSON; syntax-highlighted on a terminal."""
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self.plain:
            self.emit(text)
        else:
            self._report.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def emit_table(self, title: str, headers: list[str], rows: list[list[str]]) -> None:
        """Write one table of findings.

        Plain output is tab-separated with a header line and no title, so
        ``cut``/``awk`` can consume it directly.
        """
        if self.plain:
            for row in [headers, *rows]:
                self.emit("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        self._report.print(table)

    # -- diagnostics (stderr) ------------------------------------------- #

    def _diagnose(
        self, message: str, label: str = "", label_style: str = "", line_style: str = ""
    ) -> None:
        if self.no_color:
            sys.stderr.write(f"{label}{message}\n")
            sys.stderr.flush()
            return
        line = Text.assemble((label, label_style), message, style=line_style)
        self._diagnostics.print(line)

    def info(self, message: str) -> None:
        if not self.quiet:
            self._diagnose(message)

    def success(self, message: str) -> None:
        if not self.quiet:
            self._diagnose(message, line_style="green")

    def hint(self, message: str) -> None:
        """A suggested fix, printed as ``→ message``."""
        if not self.quiet:
            self._diagnose(message, label="→ ", line_style="dim")

    def warning(self, message: str) -> None:
        self._diagnose(message, label="Warning: ", label_style="yellow")

    def error(self, message: str) -> None:
        self._diagnose(message, label="Error: ", label_style="bold red")

    def debug(self, message: str) -> None:
        if self.verbose:
            self._diagnose(message, label="[debug] ", line_style="dim")


# -- process-wide manager ---------------------------------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next call builds a fresh default."""
    global _output
    _output = None


def emit(text: str) -> None:
    get_output().emit(text)


def emit_json(data: Any) -> None:
    get_output().emit_json(data)


def emit_table(title: str, headers: list[str], rows: list[list[str]]) -> None:
    get_output().emit_table(title, headers, rows)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def hint(message: str) -> None:
    get_output().hint(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
