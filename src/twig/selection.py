"""Interactive branch and remote selection."""

import re
from typing import Iterable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from twig.inventory import BranchRecord

DEFAULT_REMOTE = "origin"

_RANGE = re.compile(r"^(\d+)-(\d+)$")


class SelectionError(ValueError):
    """Operator input that does not describe a selection."""


def filter_by_keyword(records: Iterable[BranchRecord], keyword: str) -> list[BranchRecord]:
    """Keep records whose name contains ``keyword`` (case-sensitive)."""
    return [record for record in records if keyword in record.name]


def parse_selection(text: str, count: int) -> list[int]:
    """Parse a checklist answer into sorted zero-based indices.

    Accepts 1-based numbers and ranges separated by commas or spaces
    (``1,3-5 7``), ``all`` or ``*`` for everything, and an empty answer for
    nothing.

    Raises:
        SelectionError: If a token is not a number or range within ``1..count``
    """
    text = text.strip()
    if not text:
        return []
    if text.lower() in ("all", "*"):
        return list(range(count))

    chosen: set[int] = set()
    for token in re.split(r"[,\s]+", text):
        if not token:
            continue
        match = _RANGE.match(token)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
        elif token.isdigit():
            start = end = int(token)
        else:
            raise SelectionError(f"Not a branch number: {token!r}")
        if start > end:
            raise SelectionError(f"Backwards range: {token!r}")
        if start < 1 or end > count:
            raise SelectionError(f"Out of range (1-{count}): {token!r}")
        chosen.update(range(start - 1, end))
    return sorted(chosen)


def create_checklist(records: list[BranchRecord]) -> Table:
    """Create a numbered table of branches to pick from."""
    table = Table(
        title="Branches",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Remote", style="green", justify="center")
    for number, record in enumerate(records, start=1):
        table.add_row(str(number), escape(record.name), "✅" if record.is_remote_tracked else "")
    return table


def select_branches(records: list[BranchRecord], console: Console) -> list[str]:
    """Show the records as a checklist and return the names the operator picks."""
    if not records:
        return []

    console.print(create_checklist(records))
    while True:
        answer = typer.prompt(
            "Select branches to delete (e.g. 1,3-5, 'all', empty for none)",
            default="",
            show_default=False,
        )
        try:
            indices = parse_selection(answer, len(records))
        except SelectionError as err:
            console.print(f"[red]{escape(str(err))}[/red]")
            continue
        return [records[index].name for index in indices]


def choose_remote(remotes: list[str], console: Console) -> str:
    """Pick the remote to work against.

    With more than one remote configured the operator chooses, by number or
    name; otherwise ``origin`` is used.
    """
    if len(remotes) <= 1:
        return DEFAULT_REMOTE

    for number, name in enumerate(remotes, start=1):
        console.print(f"  [dim]{number}[/dim] {escape(name)}")
    while True:
        answer = typer.prompt("Select the remote to use").strip()
        if answer in remotes:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(remotes):
            return remotes[int(answer) - 1]
        console.print(f"[red]Unknown remote: {escape(answer)}[/red]")
