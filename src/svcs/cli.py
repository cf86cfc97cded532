"""CLI for svcs."""

import logging
import os
from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from typer.core import TyperGroup

from .constants import DEBUG_ENV_VAR, ROOT_ENV_VAR, TEXT_ENCODING, TEXT_ERRORS
from .errors import (
    AuthorNotSetError,
    CommitNotFoundError,
    NoOpError,
    NoTrackedFilesError,
    NotFoundError,
    VcsError,
)
from .repository import Repository

HELP_TEXT = """\
These are SVCS commands:
config     Get and set a username.
add        Add a file to the index.
log        Show commit logs.
commit     Save changes.
checkout   Restore a file."""


console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)
logger = logging.getLogger(__name__)


class SvcsGroup(TyperGroup):
    """Command group printing the SVCS help and answering unknown commands with a message."""

    def get_help(self, ctx: click.Context) -> str:
        return HELP_TEXT

    def resolve_command(self, ctx: click.Context, args: List[str]):
        cmd_name = args[0] if args else None
        if cmd_name and not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            _say(f"'{cmd_name}' is not a SVCS command.")
            ctx.exit(0)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=SvcsGroup,
    add_completion=False,
    help="Simple version control: track files, commit snapshots, check them out.",
)


def _printable(text: str) -> str:
    """Undecodable bytes carried as surrogates are shown as U+FFFD."""
    return text.encode(TEXT_ENCODING, TEXT_ERRORS).decode(TEXT_ENCODING, "replace")


def _say(message: str) -> None:
    """Print plain text (user content is never treated as markup)."""
    console.print(_printable(message), markup=False, highlight=False, emoji=False, soft_wrap=True)


def _fail(error: Exception) -> None:
    """Report an error on one line and end the command with status 1."""
    console.print(f"[red]✗[/red] {escape(_printable(str(error)))}", soft_wrap=True)
    raise typer.Exit(1)


def _configure_logging(verbose: bool) -> None:
    """Send svcs logs to stderr through rich; DEBUG when verbose."""
    debug_env = os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes")
    level = logging.DEBUG if (verbose or debug_env) else logging.WARNING

    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    pkg_logger = logging.getLogger("svcs")
    pkg_logger.handlers = [handler]
    pkg_logger.setLevel(level)
    pkg_logger.propagate = False


def open_repository() -> Repository:
    """Open the repository in the current directory (or $SVCS_ROOT).

    Raises:
        typer.Exit: If the storage layout or settings can't be loaded
    """
    root = os.environ.get(ROOT_ENV_VAR)
    try:
        return Repository.open(Path(root) if root else None)
    except VcsError as e:
        _fail(e)
    except OSError as e:
        _fail(VcsError(f"Could not create vcs directory structure: {e}"))


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    """Simple version control: track files, commit snapshots, check them out."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        _say(HELP_TEXT)
        raise typer.Exit()


@app.command()
def config(
    name: Optional[str] = typer.Argument(None, help="Username to save"),
):
    """Get and set a username.

    Examples:
        svcs config          # Show the username
        svcs config alice    # Set the username
    """
    repo = open_repository()

    try:
        if name is None:
            author = repo.get_author()
            if author:
                _say(f"The username is {author}.")
            else:
                _say("Please, tell me who you are.")
            return

        repo.set_author(name)
    except VcsError as e:
        _fail(e)

    _say(f"The username is {name}.")


@app.command()
def add(
    file: Optional[str] = typer.Argument(None, help="File to track"),
):
    """Add a file to the index.

    Examples:
        svcs add             # List tracked files
        svcs add notes.txt   # Track a file
    """
    repo = open_repository()

    try:
        if file is None:
            tracked = repo.tracked_files()
            if tracked.files:
                _say("Tracked files:")
                for path in tracked.files:
                    _say(path)
            else:
                _say("Add a file to the index.")
            return

        repo.track(file)
    except NotFoundError:
        _say(f"Can't find '{file}'.")
        return
    except VcsError as e:
        _fail(e)

    _say(f"The file '{file}' is tracked.")


@app.command()
def commit(
    message: Optional[str] = typer.Argument(None, help="Commit message"),
):
    """Save changes.

    Snapshots every tracked file. Does nothing when the content matches the
    latest commit.
    """
    repo = open_repository()

    if message is None:
        _say("Message was not passed.")
        return

    try:
        result = repo.commit(message)
    except NoTrackedFilesError:
        _say("Nothing to commit. Add a file to the index first.")
        return
    except NoOpError:
        _say("Nothing to commit.")
        return
    except AuthorNotSetError:
        _say("Please, tell me who you are.")
        raise typer.Exit(1)
    except VcsError as e:
        _fail(e)

    logger.debug("Committed %s", result.summary())
    _say("Changes are committed.")


@app.command()
def log():
    """Show commit logs, newest first."""
    repo = open_repository()

    try:
        blocks = repo.log()
    except VcsError as e:
        _fail(e)

    if not blocks:
        _say("No commits yet.")
        return

    _say("\n\n".join(blocks))


@app.command()
def checkout(
    commit_id: Optional[str] = typer.Argument(None, metavar="ID", help="Commit id to restore"),
):
    """Restore a file.

    Overwrites working files with the content stored in the commit. Files
    not in the commit are left alone.
    """
    repo = open_repository()

    if commit_id is None:
        _say("Commit id was not passed.")
        return

    try:
        repo.checkout(commit_id)
    except CommitNotFoundError:
        _say("Commit does not exist.")
        return
    except VcsError as e:
        _fail(e)

    _say(f"Switched to commit {commit_id}.")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
