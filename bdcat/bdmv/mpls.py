"""Parser for Blu-ray MPLS (Movie PlayList) files."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from bdcat.bdmv.reader import BinaryReader
from bdcat.errors import (
    ClipNotFoundError,
    DuplicatePlaylistError,
    FormatError,
    StructureError,
)
from bdcat.model import (
    AUDIO_TYPES,
    GRAPHICS_TYPES,
    TEXT_SUBTITLE_TYPES,
    VIDEO_TYPES,
    Playlist,
    PlaylistItem,
    Stream,
    StreamType,
    ticks_to_pts,
)

log = logging.getLogger(__name__)

_MAGIC = b"MPLS"
_VERSIONS = (b"0100", b"0200", b"0300")
_CLIP_CODEC_ID = b"M2TS"


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Switches controlling how strictly a disc is decoded."""

    skip_duplicates: bool = False
    check_clip_files: bool = True


# ---------------------------------------------------------------------------
# Stream entries
# ---------------------------------------------------------------------------


def _read_pid(r: BinaryReader) -> int:
    """Parse a stream entry and return the PID it refers to."""
    entry_len = r.u8()
    entry_start = r.tell()
    stream_type = r.u8()
    if stream_type == 0x01:
        pid = r.u16()
    elif stream_type in (0x02, 0x04):
        r.skip(2)  # sub_path_id, sub_clip_entry_id
        pid = r.u16()
    elif stream_type == 0x03:
        r.skip(1)  # sub_path_id
        pid = r.u16()
    else:
        raise FormatError(f"unknown stream entry type {stream_type} at offset {entry_start}")
    r.seek(entry_start + entry_len)
    return pid


def read_stream_info(r: BinaryReader, streams: list[Stream]) -> Stream | None:
    """Decode one stream entry + attributes record at the cursor.

    A PID already present in *streams* is skipped without reading its
    attributes and ``None`` is returned. Otherwise the new :class:`Stream`
    is appended to *streams* and returned. The cursor always ends at the
    declared end of the attributes record.
    """
    pid = _read_pid(r)

    attr_len = r.u8()
    attr_start = r.tell()
    if any(s.pid == pid for s in streams):
        log.debug("Skipping repeated PID 0x%04X", pid)
        r.seek(attr_start + attr_len)
        return None

    coding_type = r.u8()
    kind = StreamType.from_code(coding_type)
    attrs: dict = {}
    if kind in VIDEO_TYPES:
        packed = r.u8()
        attrs["video_format"] = packed >> 4
        attrs["frame_rate"] = packed & 0x0F
    elif kind in AUDIO_TYPES:
        packed = r.u8()
        attrs["channel_layout"] = packed >> 4
        attrs["sample_rate"] = packed & 0x0F
        attrs["lang_code"] = r.read_string(3)
    elif kind in GRAPHICS_TYPES:
        attrs["lang_code"] = r.read_string(3)
    elif kind in TEXT_SUBTITLE_TYPES:
        r.skip(1)  # character_code
        attrs["lang_code"] = r.read_string(3)

    r.seek(attr_start + attr_len)
    stream = Stream(pid=pid, coding_type=coding_type, **attrs)
    streams.append(stream)
    return stream


def _skip_extra_attributes(r: BinaryReader) -> None:
    """Skip a count-prefixed block of reference bytes padded to 16 bits."""
    count = r.u8()
    r.skip(1)  # reserved
    r.skip(count + (count % 2))


def read_stn_table(r: BinaryReader, streams: list[Stream]) -> list[Stream]:
    """Parse the STN_table, merging newly seen streams into *streams*."""
    r.skip(4)  # length + reserved

    num_video = r.u8()
    num_audio = r.u8()
    num_pg = r.u8()
    num_ig = r.u8()
    num_secondary_audio = r.u8()
    num_secondary_video = r.u8()
    num_pip_pg = r.u8()
    r.skip(5)  # reserved

    for _ in range(num_video + num_audio + num_pg + num_pip_pg + num_ig):
        read_stream_info(r, streams)

    for _ in range(num_secondary_audio):
        read_stream_info(r, streams)
        _skip_extra_attributes(r)  # primary audio references

    for _ in range(num_secondary_video):
        read_stream_info(r, streams)
        _skip_extra_attributes(r)  # secondary audio references
        _skip_extra_attributes(r)  # PiP PG references

    return streams


# ---------------------------------------------------------------------------
# PlayItems
# ---------------------------------------------------------------------------


def _resolve_clip(root: Path, clip_name: str, check_exists: bool) -> str:
    path = root / "STREAM" / f"{clip_name}.M2TS"
    if not check_exists or path.exists():
        return str(path)
    # UDF mounts usually expose the lower-case spelling.
    alt = path.with_suffix(".m2ts")
    if alt.exists():
        return str(alt)
    raise ClipNotFoundError(str(path))


def _parse_play_items(
    r: BinaryReader, root: Path, options: ParseOptions
) -> tuple[list[PlaylistItem], list[Stream], int]:
    """Parse the PlayList section at the cursor.

    Returns *(items, streams, duration)*.
    """
    base = r.tell()
    r.skip(6)  # length + reserved
    num_items = r.u16()
    cursor = base + 10

    items: list[PlaylistItem] = []
    streams: list[Stream] = []
    duration = 0
    seen: set[str] = set()

    for idx in range(num_items):
        r.seek(cursor)
        item_len = r.u16()
        cursor += item_len + 2

        clip = r.read_bytes(9)
        if clip[5:9] != _CLIP_CODEC_ID:
            raise FormatError(f"PlayItem {idx}: unexpected codec id {clip[5:9]!r}")
        file_name = _resolve_clip(root, clip[:5].decode("latin-1"), options.check_clip_files)
        if file_name in seen:
            raise StructureError(f"PlayItem {idx}: clip {file_name} referenced twice")
        seen.add(file_name)

        flags = r.read_bytes(3)
        is_multi_angle = bool((flags[1] >> 4) & 1)

        start_pts = ticks_to_pts(r.u32())
        end_pts = ticks_to_pts(r.u32())
        items.append(
            PlaylistItem(
                file_name=file_name,
                start_pts=start_pts,
                end_pts=end_pts,
                start_time=duration,
            )
        )
        duration += end_pts - start_pts

        r.skip(12)  # UO_mask_table, random access flag, still mode/time
        if is_multi_angle:
            angle_count = max(r.u8(), 1)
            r.skip(1)  # is_different_audios, is_seamless_angle_change
            r.skip(10 * (angle_count - 1))  # clip_name(5) + codec_id(4) + STC_id(1)

        read_stn_table(r, streams)
        log.debug("PlayItem %d: %s, %d streams so far", idx, file_name, len(streams))

    return items, streams, duration


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_mpls(
    source: Union[BinaryReader, str, Path],
    root: Union[str, Path],
    options: ParseOptions | None = None,
    accepted: Sequence[Playlist] = (),
) -> Playlist:
    """Parse an MPLS file and return a :class:`Playlist` object.

    *root* is the BDMV directory clip file names are resolved against.
    *accepted* holds playlists already kept in this run; it is only
    consulted when ``options.skip_duplicates`` is set.

    Raises a :class:`~bdcat.errors.BDError` subclass when the file is
    rejected.
    """
    options = options or ParseOptions()
    if isinstance(source, BinaryReader):
        return _parse_mpls_reader(source, "", Path(root), options, accepted)
    path = Path(source)
    with BinaryReader(path) as r:
        return _parse_mpls_reader(r, str(path), Path(root), options, accepted)


def _parse_mpls_reader(
    r: BinaryReader,
    name: str,
    root: Path,
    options: ParseOptions,
    accepted: Sequence[Playlist],
) -> Playlist:
    magic = r.read_bytes(4)
    if magic != _MAGIC:
        raise FormatError(f"Not an MPLS file (magic={magic!r})")
    version = r.read_bytes(4)
    if version not in _VERSIONS:
        raise FormatError(f"Unsupported MPLS version {version!r}")

    playlist_start = r.u32()
    r.seek(playlist_start)
    items, streams, duration = _parse_play_items(r, root, options)

    if duration <= 0:
        raise StructureError(f"playlist has zero or negative duration ({duration})")

    playlist = Playlist(
        mpls_file_name=name,
        duration=duration,
        items=tuple(items),
        streams=tuple(streams),
    )
    if options.skip_duplicates and playlist in accepted:
        raise DuplicatePlaylistError("playlist duplicates one already in the catalogue")
    return playlist


def parse_mpls_dir(
    playlist_dir: Union[str, Path],
    root: Union[str, Path, None] = None,
    options: ParseOptions | None = None,
) -> list[Playlist]:
    """Parse all ``*.mpls`` files in *playlist_dir*, in filename order.

    Files that fail to decode are logged and skipped. *root* defaults to
    the parent of *playlist_dir*.
    """
    d = Path(playlist_dir)
    root = Path(root) if root is not None else d.parent
    options = options or ParseOptions()

    try:
        entries = sorted(d.iterdir())
    except OSError as exc:
        raise StructureError(f"cannot list playlists in {d}: {exc}") from exc

    results: list[Playlist] = []
    for p in entries:
        if not (p.is_file() and p.name.endswith(".mpls")):
            continue
        try:
            results.append(parse_mpls(p, root, options, results))
        except DuplicatePlaylistError:
            log.info("Skipping %s: duplicate of an earlier playlist", p.name)
        except ValueError as exc:
            log.warning("Skipping unparseable MPLS %s: %s", p.name, exc)
    return results
