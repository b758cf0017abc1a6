"""Build a catalogue of every playable playlist on a disc."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from bdcat.bdmv.mpls import ParseOptions, parse_mpls_dir
from bdcat.errors import StructureError
from bdcat.model import Catalog

log = logging.getLogger(__name__)

__all__ = ["REQUIRED_ENTRIES", "ParseOptions", "parse_disc"]

REQUIRED_ENTRIES = ("index.bdmv", "CLIPINF", "PLAYLIST", "STREAM")
_REQUIRED_DIRS = ("CLIPINF", "PLAYLIST", "STREAM")


def _missing_entries(root: Path) -> list[str]:
    missing = []
    for name in REQUIRED_ENTRIES:
        entry = root / name
        if not entry.exists():
            missing.append(f"missing {name}")
        elif name in _REQUIRED_DIRS and not entry.is_dir():
            missing.append(f"{name} is not a directory")
    return missing


def parse_disc(
    root: Union[str, Path],
    options: ParseOptions | None = None,
    *,
    skip_duplicates: bool | None = None,
    check_clip_files: bool | None = None,
) -> Catalog:
    """Decode every playlist under *root* (a BDMV directory).

    Keyword switches override the matching fields of *options*. Individual
    playlists that fail to decode are logged and left out. Raises
    :class:`StructureError` when a required entry is missing or no playlist
    could be decoded.
    """
    options = options or ParseOptions()
    if skip_duplicates is not None or check_clip_files is not None:
        options = ParseOptions(
            skip_duplicates=options.skip_duplicates if skip_duplicates is None else skip_duplicates,
            check_clip_files=(
                options.check_clip_files if check_clip_files is None else check_clip_files
            ),
        )

    root = Path(root)
    missing = _missing_entries(root)
    if missing:
        raise StructureError(f"{root} is not a BDMV directory ({', '.join(missing)})")

    playlists = parse_mpls_dir(root / "PLAYLIST", root, options)
    if not playlists:
        raise StructureError(f"no playable playlists found under {root / 'PLAYLIST'}")

    # sorted() is stable, so equal durations keep filename order.
    playlists = sorted(playlists, key=lambda pl: pl.duration, reverse=True)
    log.info("Catalogued %d playlist(s) from %s", len(playlists), root)
    return Catalog(path=str(root), playlists=tuple(playlists))
