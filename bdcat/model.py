from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path

# MPLS in/out times tick at 45 kHz; scaling by 20000/90 gives 100 ns units.
PTS_PER_MS = 10_000


def ticks_to_pts(ticks: int) -> int:
    """Convert MPLS clock ticks to pts units.

    Computed in floating point and truncated, matching the values produced
    by existing tools built on the same conversion.
    """
    return int(20000.0 * ticks / 90)


def pts_to_ms(pts: int) -> int:
    return pts // PTS_PER_MS


class StreamType(IntEnum):
    UNKNOWN = 0x00
    MPEG1_VIDEO = 0x01
    MPEG2_VIDEO = 0x02
    H264_VIDEO = 0x1B
    H264_MVC_VIDEO = 0x20
    HEVC_VIDEO = 0x24
    VC1_VIDEO = 0xEA
    MPEG1_AUDIO = 0x03
    MPEG2_AUDIO = 0x04
    MPEG2_AAC_AUDIO = 0x0F
    MPEG4_AAC_AUDIO = 0x11
    LPCM_AUDIO = 0x80
    AC3_AUDIO = 0x81
    DTS_AUDIO = 0x82
    AC3_TRUE_HD_AUDIO = 0x83
    AC3_PLUS_AUDIO = 0x84
    DTS_HD_AUDIO = 0x85
    DTS_HD_MASTER_AUDIO = 0x86
    AC3_PLUS_SECONDARY_AUDIO = 0xA1
    DTS_HD_SECONDARY_AUDIO = 0xA2
    PRESENTATION_GRAPHICS = 0x90
    INTERACTIVE_GRAPHICS = 0x91
    SUBTITLE = 0x92

    @classmethod
    def from_code(cls, code: int) -> StreamType:
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


VIDEO_TYPES = frozenset(
    {
        StreamType.MPEG1_VIDEO,
        StreamType.MPEG2_VIDEO,
        StreamType.H264_VIDEO,
        StreamType.H264_MVC_VIDEO,
        StreamType.HEVC_VIDEO,
        StreamType.VC1_VIDEO,
    }
)
# AAC tags are named but carry no attribute block in playlists.
AUDIO_TYPES = frozenset(
    {
        StreamType.MPEG1_AUDIO,
        StreamType.MPEG2_AUDIO,
        StreamType.LPCM_AUDIO,
        StreamType.AC3_AUDIO,
        StreamType.DTS_AUDIO,
        StreamType.AC3_TRUE_HD_AUDIO,
        StreamType.AC3_PLUS_AUDIO,
        StreamType.DTS_HD_AUDIO,
        StreamType.DTS_HD_MASTER_AUDIO,
        StreamType.AC3_PLUS_SECONDARY_AUDIO,
        StreamType.DTS_HD_SECONDARY_AUDIO,
    }
)
GRAPHICS_TYPES = frozenset({StreamType.PRESENTATION_GRAPHICS, StreamType.INTERACTIVE_GRAPHICS})
TEXT_SUBTITLE_TYPES = frozenset({StreamType.SUBTITLE})

_CODEC_NAME: dict[StreamType, str] = {
    StreamType.MPEG1_VIDEO: "MPEG-1 Video",
    StreamType.MPEG2_VIDEO: "MPEG-2 Video",
    StreamType.H264_VIDEO: "H.264/AVC",
    StreamType.H264_MVC_VIDEO: "H.264/MVC",
    StreamType.HEVC_VIDEO: "HEVC",
    StreamType.VC1_VIDEO: "VC-1",
    StreamType.MPEG1_AUDIO: "MPEG-1 Audio",
    StreamType.MPEG2_AUDIO: "MPEG-2 Audio",
    StreamType.MPEG2_AAC_AUDIO: "MPEG-2 AAC",
    StreamType.MPEG4_AAC_AUDIO: "MPEG-4 AAC",
    StreamType.LPCM_AUDIO: "LPCM",
    StreamType.AC3_AUDIO: "AC-3",
    StreamType.DTS_AUDIO: "DTS",
    StreamType.AC3_TRUE_HD_AUDIO: "TrueHD",
    StreamType.AC3_PLUS_AUDIO: "AC-3+",
    StreamType.DTS_HD_AUDIO: "DTS-HD HR",
    StreamType.DTS_HD_MASTER_AUDIO: "DTS-HD MA",
    StreamType.AC3_PLUS_SECONDARY_AUDIO: "DD+ secondary",
    StreamType.DTS_HD_SECONDARY_AUDIO: "DTS-HD secondary",
    StreamType.PRESENTATION_GRAPHICS: "PGS",
    StreamType.INTERACTIVE_GRAPHICS: "IG",
    StreamType.SUBTITLE: "Text subtitle",
}


class _Labelled(IntEnum):
    """IntEnum with a display label and a tolerant lookup."""

    @classmethod
    def from_code(cls, code: int):
        try:
            return cls(code)
        except ValueError:
            return cls(0)

    @property
    def label(self) -> str:
        return _LABELS.get((type(self), int(self)), "Unknown")


class VideoFormat(_Labelled):
    UNKNOWN = 0
    FORMAT_480I = 1
    FORMAT_576I = 2
    FORMAT_480P = 3
    FORMAT_1080I = 4
    FORMAT_720P = 5
    FORMAT_1080P = 6
    FORMAT_576P = 7
    FORMAT_2160P = 8


class FrameRate(_Labelled):
    UNKNOWN = 0
    RATE_23_976 = 1
    RATE_24 = 2
    RATE_25 = 3
    RATE_29_97 = 4
    RATE_50 = 6
    RATE_59_94 = 7


class AspectRatio(_Labelled):
    UNKNOWN = 0
    RATIO_4_3 = 2
    RATIO_16_9 = 3
    RATIO_2_21 = 4


class ChannelLayout(_Labelled):
    UNKNOWN = 0
    MONO = 1
    STEREO = 3
    MULTI = 6
    COMBO = 12


class SampleRate(_Labelled):
    UNKNOWN = 0
    RATE_48 = 1
    RATE_96 = 4
    RATE_192 = 5
    RATE_48_192 = 12
    RATE_48_96 = 14


_LABELS: dict[tuple[type, int], str] = {
    (VideoFormat, VideoFormat.FORMAT_480I): "480i",
    (VideoFormat, VideoFormat.FORMAT_576I): "576i",
    (VideoFormat, VideoFormat.FORMAT_480P): "480",
    (VideoFormat, VideoFormat.FORMAT_1080I): "1080i",
    (VideoFormat, VideoFormat.FORMAT_720P): "720",
    (VideoFormat, VideoFormat.FORMAT_1080P): "1080",
    (VideoFormat, VideoFormat.FORMAT_576P): "576",
    (VideoFormat, VideoFormat.FORMAT_2160P): "4k",
    (FrameRate, FrameRate.RATE_23_976): "23.976",
    (FrameRate, FrameRate.RATE_24): "24",
    (FrameRate, FrameRate.RATE_25): "25",
    (FrameRate, FrameRate.RATE_29_97): "29.97",
    (FrameRate, FrameRate.RATE_50): "50",
    (FrameRate, FrameRate.RATE_59_94): "59.94",
    (AspectRatio, AspectRatio.RATIO_4_3): "4:3",
    (AspectRatio, AspectRatio.RATIO_16_9): "16:9",
    (AspectRatio, AspectRatio.RATIO_2_21): "2.21:1",
    (ChannelLayout, ChannelLayout.MONO): "mono",
    (ChannelLayout, ChannelLayout.STEREO): "stereo",
    (ChannelLayout, ChannelLayout.MULTI): "multi",
    (ChannelLayout, ChannelLayout.COMBO): "stereo+multi",
    (SampleRate, SampleRate.RATE_48): "48kHz",
    (SampleRate, SampleRate.RATE_96): "96kHz",
    (SampleRate, SampleRate.RATE_192): "192kHz",
    (SampleRate, SampleRate.RATE_48_192): "48/192kHz",
    (SampleRate, SampleRate.RATE_48_96): "48/96kHz",
}


class StreamFormat(Enum):
    VIDEO = "Video"
    AUDIO = "Audio"
    SUBTITLES = "Subtitles"


@dataclass(frozen=True, slots=True)
class Stream:
    """One elementary stream referenced by a playlist.

    Attribute codes are the raw nibbles from the stream attributes record;
    0 means the attribute is not present.
    """

    pid: int
    coding_type: int
    lang_code: str = ""
    video_format: int = 0
    frame_rate: int = 0
    aspect_ratio: int = 0
    channel_layout: int = 0
    sample_rate: int = 0

    @property
    def stream_type(self) -> StreamType:
        return StreamType.from_code(self.coding_type)

    @property
    def codec(self) -> str:
        return _CODEC_NAME.get(self.stream_type, f"0x{self.coding_type:02X}")

    @property
    def format(self) -> StreamFormat:
        if self.video_format:
            return StreamFormat.VIDEO
        if self.channel_layout:
            return StreamFormat.AUDIO
        return StreamFormat.SUBTITLES

    @property
    def is_video(self) -> bool:
        return self.format is StreamFormat.VIDEO

    @property
    def is_audio(self) -> bool:
        return self.format is StreamFormat.AUDIO


@dataclass(frozen=True, slots=True)
class PlaylistItem:
    file_name: str
    start_pts: int
    end_pts: int
    start_time: int

    @property
    def duration(self) -> int:
        return self.end_pts - self.start_pts

    @property
    def clip_id(self) -> str:
        return Path(self.file_name).stem


@dataclass(frozen=True, slots=True)
class Playlist:
    """A decoded ``.mpls`` file.

    Equality ignores the source path so structurally identical playlists
    under different names compare equal.
    """

    mpls_file_name: str = field(compare=False)
    duration: int
    items: tuple[PlaylistItem, ...]
    streams: tuple[Stream, ...]

    @property
    def name(self) -> str:
        return Path(self.mpls_file_name).name

    @property
    def duration_ms(self) -> int:
        return pts_to_ms(self.duration)

    @property
    def file_names(self) -> list[str]:
        return [item.file_name for item in self.items]

    @property
    def video_streams(self) -> list[Stream]:
        return [s for s in self.streams if s.format is StreamFormat.VIDEO]

    @property
    def audio_streams(self) -> list[Stream]:
        return [s for s in self.streams if s.format is StreamFormat.AUDIO]

    @property
    def subtitle_streams(self) -> list[Stream]:
        return [s for s in self.streams if s.format is StreamFormat.SUBTITLES]


@dataclass(frozen=True, slots=True)
class Catalog:
    """All playable playlists of one disc, longest first."""

    path: str
    playlists: tuple[Playlist, ...]

    def __len__(self) -> int:
        return len(self.playlists)

    def __iter__(self):
        return iter(self.playlists)

    @property
    def main_playlist(self) -> Playlist | None:
        return self.playlists[0] if self.playlists else None

    def find(self, name: str) -> Playlist | None:
        """Look up a playlist by file name, with or without ``.mpls``."""
        for pl in self.playlists:
            if pl.name == name or pl.name == f"{name}.mpls":
                return pl
        return None
