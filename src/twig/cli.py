"""Command line interface for twig."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from twig.deletion import DeletionOutcome, delete_many
from twig.git import GitError, GitRepo
from twig.inventory import BranchRecord, load_inventory
from twig.logging_config import get_logger, setup_logging
from twig.selection import choose_remote, filter_by_keyword, select_branches

app = typer.Typer(help="Reconcile local and remote branches and delete them together")
console = Console()
logger = get_logger(__name__)

PathOption = Annotated[Path, typer.Option(envvar="TWIG_PATH", help="Path to git repository")]
RemoteOption = Annotated[
    Optional[str],
    typer.Option("--remote", "-r", envvar="TWIG_REMOTE", help="Remote to use (prompted when several exist)"),
]
KeywordOption = Annotated[
    Optional[str],
    typer.Option("--filter", "-k", help="Only keep branches whose name contains this text"),
]
ExactOption = Annotated[
    bool,
    typer.Option(
        "--exact-match",
        envvar="TWIG_EXACT_MATCH",
        help="Pair local and remote branches by full name instead of by name suffix",
    ),
]
NoFetchOption = Annotated[bool, typer.Option("--no-fetch", help="Skip fetching and pruning the remote first")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress messages"),
    debug: bool = typer.Option(False, "--debug", help="Show git commands and debug messages"),
) -> None:
    """Reconcile local and remote branches and delete them together."""
    setup_logging(verbose=verbose, debug=debug)


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        print(f"Error: {escape(str(err))}")
        raise typer.Exit(code=1) from err


def prepare_inventory(
    repo: GitRepo,
    remote: Optional[str],
    fetch: bool,
    exact: bool,
) -> tuple[str, tuple[BranchRecord, ...]]:
    """Resolve the remote, refresh it and build the inventory.

    Any failure here leaves nothing trustworthy to work with, so it ends the run.
    """
    try:
        remote_name = remote or choose_remote(repo.list_remotes(), console)
        if fetch:
            repo.fetch_and_prune(remote_name)
        inventory = load_inventory(repo, remote_name, exact=exact)
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err
    return remote_name, inventory


def create_inventory_table(records: list[BranchRecord], remote_name: str) -> Table:
    """Create a table listing branches and whether they exist on the remote."""
    table = Table(
        title=f"Branches ({remote_name})",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Remote", style="green", justify="center", no_wrap=True)
    for record in records:
        table.add_row(escape(record.name), "✅" if record.is_remote_tracked else "")
    return table


def report_outcome(outcome: DeletionOutcome) -> None:
    """Print what happened to one branch."""
    name = escape(outcome.identifier)
    if outcome.locally_deleted:
        console.print(f"[green]Deleted local branch:[/green] {name}")
    elif outcome.remotely_deleted:
        console.print(f"[green]Deleted remote branch:[/green] {name}")
    if outcome.locally_deleted and outcome.remotely_deleted:
        console.print(f"[green]Deleted corresponding remote branch:[/green] {escape(outcome.remote_ref or '')}")
    if outcome.error is not None:
        console.print(f"[red]Failed to delete branch:[/red] {name}: {escape(outcome.error)}")


def report_outcomes(outcomes: list[DeletionOutcome]) -> None:
    """Print every outcome followed by a summary panel."""
    for outcome in outcomes:
        report_outcome(outcome)

    failed = [outcome for outcome in outcomes if outcome.failed]
    succeeded = len(outcomes) - len(failed)
    if failed:
        console.print(
            Panel(
                f"Deleted {succeeded} branch(es), [red]{len(failed)} failed[/red]",
                style="yellow",
                padding=(0, 2),
                expand=False,
            )
        )
    else:
        console.print(
            Panel(
                f"[green]Deleted {succeeded} branch(es) 🧹[/green]",
                style="green",
                padding=(0, 2),
                expand=False,
            )
        )


@app.command("list")
def list_branches(
    path: PathOption = Path("."),
    remote: RemoteOption = None,
    keyword: KeywordOption = None,
    exact: ExactOption = False,
    no_fetch: NoFetchOption = False,
) -> None:
    """List local and remote branches as one inventory."""
    repo = get_repo(path)
    remote_name, inventory = prepare_inventory(repo, remote, not no_fetch, exact)

    records = filter_by_keyword(inventory, keyword or "")
    if not records:
        console.print("[yellow]No branches found[/yellow]")
        return
    console.print(create_inventory_table(records, remote_name))


@app.command()
def delete(
    path: PathOption = Path("."),
    remote: RemoteOption = None,
    keyword: KeywordOption = None,
    branches: Annotated[
        Optional[list[str]],
        typer.Option("--branch", "-b", help="Branch to delete, skipping the checklist (repeatable)"),
    ] = None,
    exact: ExactOption = False,
    no_fetch: NoFetchOption = False,
) -> None:
    """Select branches and delete them locally, remotely, or both."""
    repo = get_repo(path)
    remote_name, inventory = prepare_inventory(repo, remote, not no_fetch, exact)

    if branches:
        known = {record.name for record in inventory}
        for name in branches:
            if name not in known:
                console.print(f"[yellow]Unknown branch, skipping:[/yellow] {escape(name)}")
        selected = [name for name in branches if name in known]
    else:
        if keyword is None:
            keyword = typer.prompt("Enter keyword to filter branches", default="", show_default=False)
        candidates = filter_by_keyword(inventory, keyword)
        if not candidates:
            console.print("[yellow]No branches match[/yellow]")
            return
        selected = select_branches(candidates, console)

    if not selected:
        console.print("\n[yellow]No branches selected[/yellow] 🤔")
        return

    logger.info("Deleting %d branch(es) against %s", len(selected), remote_name)
    outcomes = delete_many(repo, selected, remote_name, exact=exact)
    console.print()
    report_outcomes(outcomes)

    if any(outcome.failed for outcome in outcomes):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
