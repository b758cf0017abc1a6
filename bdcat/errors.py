"""Exception types raised while decoding a BDMV structure."""

from __future__ import annotations


class BDError(ValueError):
    """Base class for every decode failure."""


class ReadError(BDError):
    """Short read, seek before the start of data, or unreadable file."""


class FormatError(BDError):
    """Bytes do not look like the expected on-disk format."""


class StructureError(BDError):
    """Decoded data violates a playlist or disc invariant."""


class DuplicatePlaylistError(StructureError):
    """Playlist is structurally identical to one already accepted."""


class ClipNotFoundError(BDError):
    """A playlist item references a media file that does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"clip file not found: {path}")
        self.path = path
