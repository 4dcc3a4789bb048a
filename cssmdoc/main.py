"""CSS Modules Doctor CLI - finds unused (and undefined) CSS module selectors."""
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from .analyzer.project_parser import parse_project
from .config import Config, __version__
from .report.output import (
    UnsupportedOutputFormatError,
    build_report_output,
    resolve_output_format,
    write_report_output,
)
from .utils.safe_console import err_console

app = typer.Typer(
    name="cssmdoc",
    help="Finds unused CSS modules selectors",
    add_completion=False,
)


def fail(message: str) -> None:
    """Print an error to stderr and exit with status 1."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    raise typer.Exit(1)


def version_callback(value: bool):
    if value:
        print(f"cssmdoc {__version__}")
        raise typer.Exit()


@app.command()
def run(
    project_path: str = typer.Argument(..., help="Path to project"),
    ignore: Optional[List[str]] = typer.Option(
        None, "--ignore", "-i",
        help="Paths to ignore (repeat or comma-separate). Can be directories or specific CSS files.",
    ),
    style_globs: Optional[List[str]] = typer.Option(
        None, "--styleGlobs", "--style-globs",
        help="Import suffixes of CSS module files. Uses .css by default",
    ),
    exts: Optional[List[str]] = typer.Option(
        None, "--exts",
        help="Component file extensions. Uses jsx and tsx by default",
    ),
    reverse: bool = typer.Option(
        False, "--reverse", "-r",
        help="Reverse mode - also find selectors used in components but missing from CSS files",
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o",
        help="Write the report to this file instead of stdout",
    ),
    output_format: Optional[str] = typer.Option(
        None, "--outputFormat", "--output-format",
        help="Report format: cli, json or md. Inferred from --output when omitted",
    ),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit",
    ),
):
    """Scan component files and report unused CSS module selectors."""
    project_root = Path(project_path).resolve()

    if not project_root.is_dir():
        fail(f"Project path does not exist: {project_root}")

    config = Config.load(
        project_root,
        ignore=ignore,
        style_globs=style_globs,
        exts=exts,
        reverse=reverse,
        output=output,
        output_format=output_format,
    )

    # Validate the format before doing any work
    try:
        resolve_output_format(config.output, config.output_format)
    except UnsupportedOutputFormatError as e:
        fail(str(e))

    try:
        parse_result = parse_project(project_root, config, show_progress=sys.stderr.isatty())
        report = build_report_output(
            parse_result,
            output=config.output,
            output_format=config.output_format,
            reverse=config.reverse,
        )
        write_report_output(report, config.output)
    except OSError as e:
        fail(str(e))


def main():
    app()


if __name__ == "__main__":
    main()
