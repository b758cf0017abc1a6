"""bdcat CLI: Blu-ray disc playlist catalogue."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from bdcat.bdmv.mpls import ParseOptions
from bdcat.catalog import parse_disc
from bdcat.errors import BDError
from bdcat.export import export_json, text_report
from bdcat.export.text_report import playlist_report
from bdcat.model import Catalog

app = typer.Typer(name="bdcat", help="Blu-ray disc playlist catalogue")
console = Console(stderr=True)


@app.callback()
def _configure_logging(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log decoder details"),
):
    """Decode BDMV playlists into a catalogue of playable titles."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_bdmv(path_str: str) -> Path:
    """Resolve path to actual BDMV directory.

    If path points to a dir containing BDMV/, use that.
    If path IS the BDMV dir (contains PLAYLIST/), use it directly.
    Otherwise, error out.
    """
    p = Path(path_str).resolve()
    if not p.is_dir():
        console.print(f"[red]Error:[/red] {p} is not a directory")
        raise typer.Exit(1)
    if (p / "PLAYLIST").is_dir():
        return p
    bdmv_sub = p / "BDMV"
    if bdmv_sub.is_dir() and (bdmv_sub / "PLAYLIST").is_dir():
        return bdmv_sub
    console.print(
        f"[red]Error:[/red] Cannot find BDMV structure at {p}\n"
        "  Expected a directory containing PLAYLIST/ (or a parent with BDMV/PLAYLIST/)"
    )
    raise typer.Exit(1)


def _build_catalog(bdmv: str, skip_duplicates: bool, check_clips: bool) -> Catalog:
    """Common helper: resolve BDMV and decode every playlist."""
    bdmv_path = resolve_bdmv(bdmv)
    options = ParseOptions(skip_duplicates=skip_duplicates, check_clip_files=check_clips)
    try:
        with console.status("[bold]Parsing BDMV playlists…"):
            return parse_disc(bdmv_path, options)
    except BDError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


_SKIP_DUPLICATES = typer.Option(
    False,
    "--skip-duplicates/--keep-duplicates",
    help="Drop playlists identical to one already catalogued",
)
_CHECK_CLIPS = typer.Option(
    True,
    "--check-clips/--no-check-clips",
    help="Reject playlists whose STREAM files are missing",
)


@app.command()
def scan(
    bdmv: str = typer.Argument(..., help="Path to BDMV directory"),
    output: str = typer.Option(None, "-o", "--output", help="Output JSON file path"),
    pretty: bool = typer.Option(True, "--pretty/--compact"),
    stdout: bool = typer.Option(False, "--stdout", help="Print JSON to stdout"),
    skip_duplicates: bool = _SKIP_DUPLICATES,
    check_clips: bool = _CHECK_CLIPS,
):
    """Decode all playlists and emit the catalogue as JSON."""
    catalog = _build_catalog(bdmv, skip_duplicates, check_clips)
    json_str = export_json(catalog, path=output, pretty=pretty)
    if stdout or output is None:
        typer.echo(json_str)
    else:
        console.print(f"[green]Wrote:[/green] {output}")


@app.command(name="list")
def list_cmd(
    bdmv: str = typer.Argument(..., help="Path to BDMV directory"),
    skip_duplicates: bool = _SKIP_DUPLICATES,
    check_clips: bool = _CHECK_CLIPS,
):
    """List every playlist with its files and streams, longest first."""
    catalog = _build_catalog(bdmv, skip_duplicates, check_clips)
    typer.echo(text_report(catalog))


@app.command(name="main")
def main_cmd(
    bdmv: str = typer.Argument(..., help="Path to BDMV directory"),
    check_clips: bool = _CHECK_CLIPS,
):
    """Show the main movie (the longest playlist)."""
    catalog = _build_catalog(bdmv, False, check_clips)
    typer.echo("\n".join(playlist_report(catalog.main_playlist)))


if __name__ == "__main__":
    app()
