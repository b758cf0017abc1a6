import os
from collections.abc import Callable
from pathlib import Path

import pytest

from builders import (
    audio_attrs,
    default_stn,
    mpls_bytes,
    play_item,
    stn_table,
    stream,
    video_attrs,
    write_disc,
)


@pytest.fixture
def bdmv_path() -> Path:
    """Path to a real BDMV directory for smoke tests.

    Uses BDCAT_TEST_BDMV when set; skipped otherwise since real discs
    cannot be bundled.
    """
    env: str | None = os.environ.get("BDCAT_TEST_BDMV")
    if not env:
        pytest.skip("BDCAT_TEST_BDMV not set")
    p = Path(env)
    # Accept a parent dir that contains BDMV/
    if (p / "BDMV" / "PLAYLIST").is_dir():
        p = p / "BDMV"
    if not (p / "PLAYLIST").is_dir():
        pytest.skip(f"No PLAYLIST/ found at {p}")
    return p


@pytest.fixture
def make_disc(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a synthetic BDMV tree under ``tmp_path``."""

    def _make(playlists: dict[str, bytes], clips: list[str] | None = None) -> Path:
        return write_disc(tmp_path / "BDMV", playlists, clips)

    return _make


@pytest.fixture
def sample_disc(make_disc) -> Path:
    """Three playable playlists plus one corrupt file.

    * ``00000.mpls``: two items, 0.5 s total
    * ``00001.mpls``: main feature, three items, 2 s total
    * ``00002.mpls``: single 0.1 s item
    * ``00003.mpls``: bad magic
    """
    return make_disc(
        {
            "00000.mpls": mpls_bytes(
                [play_item("00001", 0, 0.25), play_item("00002", 10, 10.25)]
            ),
            "00001.mpls": mpls_bytes(
                [
                    play_item("00003", 0, 1),
                    play_item(
                        "00004",
                        0,
                        0.5,
                        stn=stn_table(
                            video=[stream(0x1011, video_attrs())],
                            audio=[
                                stream(0x1100, audio_attrs()),
                                stream(0x1101, audio_attrs(lang="eng")),
                            ],
                        ),
                    ),
                    play_item("00005", 5, 5.5, stn=default_stn()),
                ]
            ),
            "00002.mpls": mpls_bytes([play_item("00006", 0, 0.1)]),
            "00003.mpls": mpls_bytes([play_item("00007", 0, 1)], magic=b"XXXX"),
        }
    )
