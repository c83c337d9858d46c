import sys
from pathlib import Path
from typing import Annotated, NoReturn

import click
import humanize
import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from sybtools.syb.archive import Archive, pack_directory, unpack_archive
from sybtools.syb.errors import SybError
from sybtools.syb.helpers import validate_archive_path

app = typer.Typer(
    help="Tools for SYB archives (.syb files from Syberia 2)",
    no_args_is_help=True,
)


def abort(error: Exception) -> NoReturn:
    print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(code=1)


def transfer_progress() -> Progress:
    return Progress(
        SpinnerColumn(finished_text=":white_check_mark:"),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        TimeRemainingColumn(),
    )


def read_archive(archive_path: Path) -> Archive:
    validate_archive_path(archive_path)

    with Progress(transient=True) as progress:
        progress.add_task(
            description="Reading archive metadata...",
            total=None,
        )
        return Archive(archive_path)


@app.command(help="Prints information about a SYB archive")
def info(
    archive_path: Annotated[
        Path,
        typer.Argument(help="Path to the input .syb file"),
    ],
):
    try:
        archive = read_archive(archive_path)
    except (SybError, OSError) as e:
        abort(e)

    print(f"Number of files: {len(archive.entries)}")
    print(f"File-info table size: {archive.table_size} bytes")
    print(f"Payload size: {humanize.naturalsize(archive.payload_size)}")


@app.command(name="list", help="Lists files in a SYB archive")
def contents(
    archive_path: Annotated[
        Path,
        typer.Argument(help="Path to the input .syb file"),
    ],
):
    console = Console()

    try:
        archive = read_archive(archive_path)
    except (SybError, OSError) as e:
        abort(e)

    table = Table("File Name", "Size", "Offset")

    for entry, offset in zip(archive.entries, archive.offsets):
        table.add_row(
            escape(entry.display_name),
            humanize.naturalsize(entry.size),
            hex(offset),
        )

    console.print(table)


@app.command(help="Unpacks a SYB archive into a directory")
def unpack(
    archive_path: Annotated[
        Path,
        typer.Argument(help="Path to the input .syb file"),
    ],
    output_dir: Annotated[
        Path,
        typer.Argument(
            help="Path to the output directory (created if missing)",
        ),
    ],
):
    try:
        with transfer_progress() as progress:
            count = unpack_archive(archive_path, output_dir, progress)
    except (SybError, OSError) as e:
        abort(e)

    print(f"{count} files successfully unpacked.")


@app.command(help="Packs a directory into a SYB archive")
def pack(
    input_dir: Annotated[
        Path,
        typer.Argument(help="Path to the input directory containing files to pack"),
    ],
    output_path: Annotated[
        Path,
        typer.Argument(help="Path to where the output .syb file will be created"),
    ],
):
    try:
        with transfer_progress() as progress:
            count = pack_directory(input_dir, output_path, progress)
    except (SybError, OSError) as e:
        abort(e)

    print(f"{count} files successfully packed.")


def main():
    """Entry point for `syb-patch <mode> <inputPath> <outputPath>`."""
    try:
        exit_code = app(standalone_mode=False)
    except click.UsageError as e:
        # Wrong arguments or unknown mode only show the help
        if e.ctx is not None:
            typer.echo(e.ctx.get_help())
        exit_code = 0
    except click.Abort:
        exit_code = 1

    sys.exit(exit_code or 0)


if __name__ == "__main__":
    app()
