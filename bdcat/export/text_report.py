"""Text report for terminal display."""

from __future__ import annotations

from bdcat.model import Catalog, FrameRate, Playlist, Stream, VideoFormat


def format_pts(pts: int) -> str:
    """Format a pts value as HH:MM:SS.mmm."""
    ms = pts // 10_000
    hours = ms // 3_600_000
    minutes = (ms // 60_000) % 60
    seconds = (ms // 1000) % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms % 1000:03d}"


def format_stream(s: Stream) -> str:
    """One-line description, e.g. ``PID : 4113, type : H264_VIDEO (Video 1080@23.976)``."""
    kind = s.format.value
    if s.is_video:
        video = VideoFormat.from_code(s.video_format).label
        rate = FrameRate.from_code(s.frame_rate).label
        kind += f" {video}@{rate}"
    info = f"PID : {s.pid}, type : {s.stream_type.name} ({kind})"
    if s.lang_code:
        info += f", language : {s.lang_code}"
    return info


def playlist_report(pl: Playlist) -> list[str]:
    lines = [f"Playlist : {pl.mpls_file_name}, duration : {format_pts(pl.duration)}"]
    lines.append("    List of files:")
    for item in pl.items:
        lines.append(f"        Filename : {item.file_name}")
    lines.append("    List of streams:")
    for s in pl.streams:
        lines.append(f"        {format_stream(s)}")
    return lines


def text_report(catalog: Catalog) -> str:
    """Generate a plain text listing of every playlist, longest first."""
    lines: list[str] = []
    lines.append("=" * 60)
    lines.append("Disc Summary")
    lines.append("=" * 60)
    lines.append(f"  Path:       {catalog.path}")
    lines.append(f"  Playlists:  {len(catalog)}")
    main = catalog.main_playlist
    if main is not None:
        lines.append(f"  Main:       {main.name} ({format_pts(main.duration)})")
    lines.append("")

    for pl in catalog.playlists:
        lines.extend(playlist_report(pl))
        lines.append("")

    return "\n".join(lines)
