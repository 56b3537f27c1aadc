"""CLI commands for mediaxid.

Demo commands around the image and external-id helpers:

- ``mediaxid image <kind> <gn_id>``: fetch the first available image size.
- ``mediaxid xids channel|program <gn_id>``: external ids of a channel/program.
- ``mediaxid xids match``: external ids of the work behind an ACR match.
- ``mediaxid version``.

Uses Typer for option parsing and a Rich Console for output. Defaults for
``--source`` and ``--size`` are resolved through :mod:`mediaxid.utils.config`.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from mediaxid.metadata.base import MetadataServiceClient, ServiceFault
from mediaxid.metadata.clients.http import HttpMetadataServiceClient
from mediaxid.metadata.image import ImageResolver
from mediaxid.metadata.models import (
    AcrMatch,
    Contributor,
    ExternalId,
    SizeClass,
    TvAiring,
    TvChannel,
    TvProgram,
    VideoWork,
    XidTarget,
)
from mediaxid.metadata.settings import MissingCredentialError
from mediaxid.metadata.xid import ExternalIdAggregator, deduplicate
from mediaxid.utils import debug
from mediaxid.utils.config import resolve_setting

app = typer.Typer(
    name="mediaxid",
    help="Look up images and external ids from the media metadata service.",
)
xids_app = typer.Typer(help="Fetch external ids for channels, programs and matches.")
app.add_typer(xids_app, name="xids")
console = Console()

DEFAULT_SIZES = [SizeClass.LARGE.value, SizeClass.MEDIUM.value, SizeClass.SMALL.value]


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    NOT_FOUND = 2


class ImageKind(str, Enum):
    """Object kinds accepted by the image command."""

    CHANNEL = "channel"
    PROGRAM = "program"
    WORK = "work"
    CONTRIBUTOR = "contributor"


_IMAGE_MODELS = {
    ImageKind.CHANNEL: TvChannel,
    ImageKind.PROGRAM: TvProgram,
    ImageKind.WORK: VideoWork,
    ImageKind.CONTRIBUTOR: Contributor,
}

SOURCE = Annotated[
    Optional[str],
    typer.Option(
        "--source",
        help="Only show ids from this source (e.g. tmsid). Defaults to all sources.",
    ),
]
UNIQUE = Annotated[
    bool, typer.Option("--unique", help="Drop repeated (source, value) pairs.")
]


def _build_client() -> MetadataServiceClient:
    """Create the session client from environment settings."""
    return HttpMetadataServiceClient()


def _fail(error: Exception) -> NoReturn:
    """Report a failed lookup and exit with ExitCode.ERROR."""
    debug.error(f"{type(error).__name__}: {error}")
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(ExitCode.ERROR)


def _parse_sizes(values: list[str]) -> list[SizeClass]:
    try:
        return [SizeClass(value.lower()) for value in values]
    except ValueError:
        valid = ", ".join(s.value for s in SizeClass)
        raise typer.BadParameter(f"Invalid image size. Must be one of: {valid}")


def _print_ids(ids: list[ExternalId]) -> None:
    if not ids:
        console.print("[yellow]No external ids found.[/yellow]")
        raise typer.Exit(ExitCode.NOT_FOUND)
    table = Table("Source", "Value")
    for xid in ids:
        table.add_row(xid.source, xid.value)
    console.print(table)


def _run_xids(target: XidTarget, source: Optional[str], unique: bool) -> None:
    preferred_source = resolve_setting(
        "xid.preferred_source", default="", cli_value=source
    )
    debug.debug(
        f"Fetching external ids for {target.kind} (source={preferred_source!r})"
    )
    try:
        with _build_client() as client:
            ids = ExternalIdAggregator(client).fetch(target, preferred_source)
    except (ServiceFault, MissingCredentialError) as e:
        _fail(e)
    _print_ids(deduplicate(ids) if unique else ids)


@app.command()
def image(
    kind: Annotated[ImageKind, typer.Argument(help="Kind of object.")],
    gn_id: Annotated[str, typer.Argument(help="Object id in the metadata service.")],
    size: Annotated[
        Optional[List[str]],
        typer.Option(
            "--size",
            "-s",
            help="Preferred image size, repeat in priority order.",
        ),
    ] = None,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Write the image to this file."),
    ] = None,
) -> None:
    """Fetch the first available image of an object."""
    sizes = _parse_sizes(
        resolve_setting("image.sizes", default=DEFAULT_SIZES, cli_value=size or None)
    )
    obj = _IMAGE_MODELS[kind](gn_id=gn_id)
    try:
        with _build_client() as client:
            found = ImageResolver(client).resolve_image(obj, sizes)
    except (ServiceFault, MissingCredentialError) as e:
        _fail(e)
    if found is None:
        console.print("[yellow]No image found.[/yellow]")
        raise typer.Exit(ExitCode.NOT_FOUND)
    if out is not None:
        out.write_bytes(found.data)
        console.print(
            f"Saved {found.size.value} image ({len(found.data)} bytes) to {out}"
        )
    else:
        console.print(f"Found {found.size.value} image ({len(found.data)} bytes)")


@xids_app.command()
def channel(
    gn_id: Annotated[str, typer.Argument(help="Channel id.")],
    source: SOURCE = None,
    unique: UNIQUE = False,
) -> None:
    """Show the external ids of a TV channel."""
    _run_xids(TvChannel(gn_id=gn_id), source, unique)


@xids_app.command()
def program(
    gn_id: Annotated[str, typer.Argument(help="Program id.")],
    source: SOURCE = None,
    unique: UNIQUE = False,
) -> None:
    """Show the external ids of a TV program."""
    _run_xids(TvProgram(gn_id=gn_id), source, unique)


@xids_app.command()
def match(
    airing_program: Annotated[
        Optional[str],
        typer.Option(help="Program id of the matched airing."),
    ] = None,
    work: Annotated[
        Optional[str],
        typer.Option(help="Video work id of the match."),
    ] = None,
    source: SOURCE = None,
    unique: UNIQUE = False,
) -> None:
    """Show the external ids of the video work behind an ACR match."""
    airing = None
    if airing_program is not None:
        airing = TvAiring(
            gn_id=f"airing:{airing_program}",
            program=TvProgram(gn_id=airing_program),
        )
    target = AcrMatch(
        airing=airing,
        work=VideoWork(gn_id=work) if work is not None else None,
    )
    _run_xids(target, source, unique)


@app.command()
def version() -> None:
    """Show the version of mediaxid."""
    from mediaxid.__about__ import __version__

    console.print(f"mediaxid version: [bold]{__version__}[/bold]")


def main() -> None:
    """Run the mediaxid CLI."""
    debug.setup_logger()
    app()


if __name__ == "__main__":
    main()
