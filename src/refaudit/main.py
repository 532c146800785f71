"""refaudit CLI - find potentially unused exports in Go code, across repos."""
import os
import signal
import threading
from typing import Dict, List, Sequence

import typer
from rich.markup import escape

from refaudit.config import __version__, get_config
from refaudit.analyzer.errors import AnalysisCancelled, RefAuditError
from refaudit.analyzer.extractor import find_exports
from refaudit.analyzer.reference_tracker import find_imports
from refaudit.analyzer.report import Report, diff
from refaudit.utils.safe_console import SafeConsole

FROM_ARG = "--from"
EXCLUDE_FROM_ARG = "--exclude-from"
TO_ARG = "--to"
EXCLUDE_TO_ARG = "--exclude-to"

EXIT_USAGE = 1
EXIT_FAILURE = 2

USAGE = f"""Find potentially unused exports in go code. Works across repos. There will be false positives.
Usage:
\trefaudit {FROM_ARG} [files] {TO_ARG} [files]
{FROM_ARG}: Directories that contain exports.
{TO_ARG}: Directories that contain imports.
{EXCLUDE_TO_ARG}: Directories that contain imports that you want to exclude. Optional.
{EXCLUDE_FROM_ARG}: Directories that contain exports that you want to exclude. Optional.
Examples:
\trefaudit {FROM_ARG} /path/to/library/ {TO_ARG} /path/to/app1 /path/to/app2 | tee ~/unused1.json
\trefaudit {FROM_ARG} /path/to/library/ {TO_ARG} /path/to/app1 {EXCLUDE_TO_ARG} /path/to/app1/exclude | tee ~/unused2.json"""

app = typer.Typer(
    name="refaudit",
    help="Find potentially unused exports in Go code. Works across repos.",
    add_completion=False
)
# Progress and errors go to stderr; usage and the report are plain stdout
err_console = SafeConsole(stderr=True, highlight=False, soft_wrap=True)


def expand_path(path: str) -> str:
    """Expand environment variables and make the path absolute."""
    return os.path.abspath(os.path.expandvars(path))


def split_root_args(args: Sequence[str]) -> Dict[str, List[str]]:
    """Sort positional values into the list named by the preceding flag.

    `--from a b --to c --from d` gives from=[a, b, d], to=[c]. Values that
    appear before any flag are dropped.
    """
    lists: Dict[str, List[str]] = {
        FROM_ARG: [],
        EXCLUDE_FROM_ARG: [],
        TO_ARG: [],
        EXCLUDE_TO_ARG: [],
    }
    current = None
    for arg in args:
        if arg in lists:
            current = lists[arg]
        elif current is not None:
            current.append(expand_path(arg))
    return lists


def run_audit(from_roots: Sequence[str], exclude_from: Sequence[str],
              to_roots: Sequence[str], exclude_to: Sequence[str],
              cancel: threading.Event = None, show_progress: bool = True) -> Report:
    """Run the export pass, then the usage pass, and diff the results.

    Raises:
        RefAuditError: If either pass fails; no partial report is produced
    """
    def scan(label: str, finder, roots, excluded):
        if not show_progress:
            return finder(roots, excluded, cancel=cancel)

        count = 0
        with err_console.status(f"[bold blue]{label}...") as status:
            def progress(path: str):
                nonlocal count
                count += 1
                status.update(f"[bold blue]{label}...[/bold blue] {count} files")
            found = finder(roots, excluded, cancel=cancel, progress=progress)
        err_console.print(f"[green]✓[/green] {label}: {count} files, {len(found)} symbols")
        return found

    exports = scan("Scanning exports", find_exports, from_roots, exclude_from)
    refs = scan("Scanning imports", find_imports, to_roots, exclude_to)
    return diff(exports, refs)


def version_callback(value: bool):
    if value:
        typer.echo(f"refaudit {__version__}")
        raise typer.Exit()


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def audit(
    ctx: typer.Context,
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print progress to stderr"),
    version: bool = typer.Option(False, "--version", callback=version_callback, is_eager=True,
                                 help="Show the version and exit"),
):
    """Report exports in --from directories that no --to directory references.

    Path lists follow their flag: refaudit --from LIB... --to APP... [--exclude-from DIR...] [--exclude-to DIR...]
    """
    roots = split_root_args(ctx.args)
    from_roots = roots[FROM_ARG]
    to_roots = roots[TO_ARG]
    exclude_from = roots[EXCLUDE_FROM_ARG]
    exclude_to = roots[EXCLUDE_TO_ARG]

    if not from_roots and not to_roots:
        typer.echo(USAGE)
        raise typer.Exit(EXIT_USAGE)

    # print input so user knows what's going on
    if not quiet:
        for flag in (FROM_ARG, TO_ARG, EXCLUDE_TO_ARG, EXCLUDE_FROM_ARG):
            err_console.print(f"{flag}: {escape(', '.join(roots[flag]))}")

    cancel = threading.Event()
    previous_handler = None
    if threading.current_thread() is threading.main_thread():
        previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())

    try:
        get_config()
        report = run_audit(from_roots, exclude_from, to_roots, exclude_to,
                           cancel=cancel, show_progress=not quiet)
    except AnalysisCancelled:
        err_console.print("[bold yellow]Interrupted.[/bold yellow]")
        raise typer.Exit(EXIT_FAILURE)
    except (RefAuditError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)
    finally:
        # None means the old handler was not installed from Python; nothing to restore
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    typer.echo(report.to_json())


if __name__ == "__main__":
    app()
