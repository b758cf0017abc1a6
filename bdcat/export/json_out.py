"""JSON export for disc catalogues."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from bdcat.export.text_report import format_pts
from bdcat.model import (
    AspectRatio,
    Catalog,
    ChannelLayout,
    FrameRate,
    SampleRate,
    Stream,
    VideoFormat,
    pts_to_ms,
)


def stream_to_dict(s: Stream) -> dict:
    """Convert a Stream to a JSON-serializable dict."""
    entry: dict = {
        "pid": s.pid,
        "coding_type": s.coding_type,
        "type": s.stream_type.name,
        "codec": s.codec,
        "format": s.format.value,
        "lang": s.lang_code,
    }
    if s.is_video:
        entry["video_format"] = VideoFormat.from_code(s.video_format).label
        entry["frame_rate"] = FrameRate.from_code(s.frame_rate).label
        entry["aspect_ratio"] = AspectRatio.from_code(s.aspect_ratio).label
    elif s.is_audio:
        entry["channel_layout"] = ChannelLayout.from_code(s.channel_layout).label
        entry["sample_rate"] = SampleRate.from_code(s.sample_rate).label
    return entry


def catalog_to_dict(catalog: Catalog) -> dict:
    """Convert a Catalog to a JSON-serializable dict."""
    playlists = []
    for pl in catalog.playlists:
        items = []
        for item in pl.items:
            items.append(
                {
                    "file_name": item.file_name,
                    "start_pts": item.start_pts,
                    "end_pts": item.end_pts,
                    "start_time": item.start_time,
                    "duration_ms": pts_to_ms(item.duration),
                }
            )
        playlists.append(
            {
                "mpls": pl.name,
                "path": pl.mpls_file_name,
                "duration": pl.duration,
                "duration_ms": pl.duration_ms,
                "duration_text": format_pts(pl.duration),
                "items": items,
                "streams": [stream_to_dict(s) for s in pl.streams],
            }
        )

    main = catalog.main_playlist
    return {
        "schema_version": "bdcat.catalog.v1",
        "disc": {
            "path": catalog.path,
            "generated_at": datetime.now(timezone.utc).isoformat(),
        },
        "main_playlist": main.name if main is not None else None,
        "playlists": playlists,
    }


def export_json(catalog: Catalog, path: str | Path | None = None, pretty: bool = True) -> str:
    """Export catalogue to JSON. If path given, write to file. Always returns JSON string."""
    data = catalog_to_dict(catalog)
    indent = 2 if pretty else None
    text = json.dumps(data, indent=indent, default=str)
    if path is not None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    return text
