"""Rich building blocks for sitepipe output.

Renderers draw into an in-memory Console and hand back plain strings, so
commands decide where the text goes (stdout or stderr). Without a terminal
(pipes, CliRunner) Rich drops the color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

PIPE_THEME = Theme(
    {
        "pipe.ok": "bold green",
        "pipe.error": "bold red",
        "pipe.warning": "bold yellow",
        "pipe.op": "bold cyan",
        "pipe.key": "dim",
        "pipe.path": "dim",
        "pipe.kind.success": "green",
        "pipe.kind.recovered": "yellow",
        "pipe.kind.failed": "red",
        "pipe.kind.skipped": "dim",
    }
)

# Stage outcomes plus "skipped" for stages a failed series never reached.
KINDS = ("success", "recovered", "failed", "skipped")


def create_console(*, no_color: bool = False, width: int = 120) -> Console:
    """A themed Console writing into a StringIO buffer."""
    return Console(
        file=StringIO(), theme=PIPE_THEME, no_color=no_color, highlight=False, width=width
    )


def get_output(console: Console) -> str:
    """Everything written to *console* so far."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    return f"pipe.kind.{kind}" if kind in KINDS else ""


def make_table(*columns: str, styles: dict[str, str] | None = None) -> Table:
    """Compact table with a header row; *styles* maps column names to Rich styles.

    The first column never wraps; an "Outputs" column is right-aligned.
    """
    styles = styles or {}
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for index, name in enumerate(columns):
        table.add_column(
            name,
            style=styles.get(name),
            no_wrap=index == 0,
            justify="right" if name == "Outputs" else "left",
        )
    return table
