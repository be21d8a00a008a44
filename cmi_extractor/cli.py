"""Command line interface of the CMI statement extractor.

``extract`` runs one statement through the pipeline and writes the workbook,
``serve`` starts the browser interface.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from .claude_api import ExtractionMode
from .config import DEFAULT_EXPORT_FORMAT
from .errors import AmountFormatError
from .logging_setup import configure_logging
from .session import SessionState, StatementSession
from .spreadsheet import export_filename, export_rows
from .table_view import render_rows_table


class ExportFormat(str, Enum):
    XLSX = "xlsx"
    ODS = "ods"


app = typer.Typer(
    help="Convert CMI statements into accounting journal rows.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def _main(
    log_level: str | None = typer.Option(
        None, help="Log level (DEBUG, INFO, ...). Falls back to CMI_EXTRACTOR_LOG_LEVEL."
    ),
) -> None:
    configure_logging(log_level)


def _print_warnings(warnings: tuple[str, ...]) -> None:
    if not warnings:
        return
    typer.echo(f"\n⚠ {len(warnings)} deviation(s) from the journal rules:")
    for warning in warnings:
        typer.echo(f"  - {warning}")


@app.command("extract")
def extract_cmd(
    file_path: Annotated[
        Path | None,
        typer.Argument(help="Statement file (PDF, PNG or JPEG). Opens a file dialog if omitted."),
    ] = None,
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Workbook path. Defaults to the fixed export name."
    ),
    export_format: ExportFormat = typer.Option(
        ExportFormat(DEFAULT_EXPORT_FORMAT), "--format", "-f", help="Workbook format."
    ),
    mode: ExtractionMode | None = typer.Option(
        None,
        help="groups: journal rule applied locally; journal: rows built by the model."
        " Falls back to CMI_EXTRACTION_MODE.",
    ),
    export: bool = typer.Option(True, help="Write the workbook after a successful extraction."),
) -> None:
    """Extract the journal rows of one statement and export them."""
    typer.echo("=== AI CMI STATEMENT EXTRACTOR ===\n")

    if file_path is None:
        # tkinter is only needed when no path is given
        from .ui import select_statement_file

        selected: str = select_statement_file()
        if not selected:
            typer.echo("⚠ No file selected.")
            raise typer.Exit(1)
        file_path = Path(selected)

    typer.echo(f"📄 Analyzing: {file_path}")
    session = StatementSession(mode=mode)
    state: SessionState = session.process(str(file_path))

    if state is not SessionState.SUCCESS or session.result is None:
        typer.echo(f"✗ {session.error}", err=True)
        raise typer.Exit(1)

    rows = list(session.result.rows)
    typer.echo("")
    typer.echo(render_rows_table(rows))
    typer.echo(f"\n✓ Extracted {len(rows)} row(s) from {session.result.file_name}")
    _print_warnings(session.result.warnings)

    if not export:
        return

    target: str = str(output) if output else export_filename(export_format.value)
    try:
        written: str = export_rows(rows, target)
    except AmountFormatError as e:
        typer.echo(f"✗ Export failed: {e}", err=True)
        raise typer.Exit(1) from e
    except ValueError as e:
        typer.echo(f"✗ Export failed: {e}", err=True)
        raise typer.Exit(2) from e

    typer.echo(f"✓ Exported to {written}")


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(5000, help="Port to listen on."),
    debug: bool = typer.Option(False, help="Run the Flask debug server."),
) -> None:
    """Start the browser interface."""
    from .web_app import app as web_app

    web_app.run(host=host, port=port, debug=debug)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
