"""
User-facing output helpers and diagnostic logging setup.

Everything the user is meant to read goes through the rich consoles below.
Diagnostics (what was sent where, what came back) go through `logging` and
are only shown with `--verbose`.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def success(message: str):
    console.print(f"[green]✔[/] {message}", highlight=False)


def error(message: str):
    err_console.print(f"[red]✖[/] {message}", highlight=False)


def print_markdown(text: str):
    console.print(Markdown(text))


def _code_box(code: str, title: str):
    console.print()
    console.print(
        Panel(
            Syntax(code, "bash", word_wrap=True),
            title=f"[bold white]{title}[/]",
            padding=1,
            expand=False,
        )
    )
    console.print()


def log_command(command: str):
    _code_box(f"$ {command}", "Proposed Command")


def log_script(script: str):
    _code_box(script, "Generated Script")
