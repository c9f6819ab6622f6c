"""
Command-line interface for SBOM Dependents.
"""

import json

import typer
from rich.console import Console
from rich.markup import escape

from sbom_dependents import __version__
from sbom_dependents.config import (
    get_max_depth,
    get_root_node,
    is_verbose_enabled,
    set_root_node,
    set_verbose,
)
from sbom_dependents.dependency_graph import (
    GraphParseError,
    PackageNotFoundError,
    find_dependents_with_depth,
    load_dot_graph,
)
from sbom_dependents.log import setup_logging
from sbom_dependents.report import display_report, format_report, report_to_dict

# --- Typer App ---
app = typer.Typer()
console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sbom-dependents {__version__}")
        raise typer.Exit()


@app.command()
def dependents(
    input_file: str | None = typer.Option(
        None,
        "--input-file",
        "-i",
        help="SBOM dependency graph in DOT format (Required). Use '-' for stdin.",
    ),
    package: str | None = typer.Option(
        None,
        "--package",
        "-p",
        help="Target package name, matched exactly (Required).",
    ),
    depth: int | None = typer.Option(
        None,
        "--depth",
        "-d",
        help="Max depth to search (default -1 = unlimited).",
    ),
    root_node: str | None = typer.Option(
        None,
        "--root-node",
        help="Synthetic root node excluded from results (default: RPM-Packages). Pass '' to disable.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON instead of a depth listing.",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Print the depth listing as plain tab-indented text without styling.",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Enable verbose logging. If not specified, uses config file default.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """
    List the packages that transitively depend on a package in an SBOM graph.

    Dependents are grouped by their shortest distance from the package.

    Example:
        sbom-dependents -i sbom.dot -p openssl-libs
        sbom-dependents -i sbom.dot -p glibc --depth 2
    """
    # Apply config defaults if not specified via CLI
    if verbose is not None:
        set_verbose(verbose)
    logger = setup_logging(is_verbose_enabled())

    if root_node is not None:
        set_root_node(root_node)
    if depth is None:
        depth = get_max_depth()

    if not input_file:
        err_console.print("[red]Required options: --input-file[/red]")
        raise typer.Exit(code=1)
    if not package:
        err_console.print("[red]Required options: --package[/red]")
        raise typer.Exit(code=1)

    logger.debug(
        "Options: input_file=%s package=%s depth=%d root_node=%r",
        input_file,
        package,
        depth,
        get_root_node(),
    )

    try:
        graph = load_dot_graph(input_file)
    except FileNotFoundError:
        err_console.print(
            f"[red]Error: Input file not found: {escape(input_file)}[/red]"
        )
        raise typer.Exit(code=1) from None
    except (OSError, GraphParseError) as e:
        err_console.print(
            f"[red]Error: Unable to read graph: {escape(str(e))}[/red]"
        )
        raise typer.Exit(code=1) from None

    try:
        records = find_dependents_with_depth(
            graph, package, max_depth=depth, root_node=get_root_node()
        )
    except PackageNotFoundError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    if as_json:
        typer.echo(json.dumps(report_to_dict(package, records), indent=2))
        return

    if not records:
        logger.debug("%s has no dependents", package)
        return
    if plain:
        for line in format_report(records):
            typer.echo(line)
    else:
        display_report(records, console)


if __name__ == "__main__":
    app()
