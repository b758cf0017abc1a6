"""Tests for building the disc catalogue."""

import shutil
from pathlib import Path

import pytest

from bdcat.bdmv.mpls import ParseOptions
from bdcat.catalog import REQUIRED_ENTRIES, parse_disc
from bdcat.errors import StructureError
from bdcat.model import Catalog
from builders import mpls_bytes, play_item


class TestParseDisc:
    def test_sorted_by_descending_duration(self, sample_disc: Path) -> None:
        catalog: Catalog = parse_disc(sample_disc)
        assert [pl.duration for pl in catalog] == [20_000_000, 5_000_000, 1_000_000]
        assert [pl.name for pl in catalog] == ["00001.mpls", "00000.mpls", "00002.mpls"]

    def test_main_playlist_is_longest(self, sample_disc: Path) -> None:
        catalog = parse_disc(sample_disc)
        assert catalog.main_playlist.name == "00001.mpls"
        assert len(catalog.main_playlist.items) == 3
        assert [s.pid for s in catalog.main_playlist.streams] == [0x1011, 0x1100, 0x1101]

    def test_corrupt_playlist_does_not_abort(self, sample_disc: Path, caplog) -> None:
        with caplog.at_level("WARNING"):
            catalog = parse_disc(sample_disc)
        assert len(catalog) == 3
        assert catalog.find("00003") is None
        assert "00003.mpls" in caplog.text

    def test_deterministic(self, sample_disc: Path) -> None:
        first = parse_disc(sample_disc)
        second = parse_disc(sample_disc)
        assert first.playlists == second.playlists
        assert [pl.mpls_file_name for pl in first] == [pl.mpls_file_name for pl in second]

    def test_ties_keep_filename_order(self, make_disc) -> None:
        root = make_disc(
            {
                "00005.mpls": mpls_bytes([play_item("00005", 0, 1)]),
                "00002.mpls": mpls_bytes([play_item("00002", 0, 1)]),
                "00009.mpls": mpls_bytes([play_item("00009", 0, 3)]),
            }
        )
        catalog = parse_disc(root)
        assert [pl.name for pl in catalog] == ["00009.mpls", "00002.mpls", "00005.mpls"]

    def test_find_accepts_stem(self, sample_disc: Path) -> None:
        catalog = parse_disc(sample_disc)
        assert catalog.find("00002").name == "00002.mpls"
        assert catalog.find("00002.mpls") is catalog.find("00002")

    def test_catalog_path(self, sample_disc: Path) -> None:
        assert parse_disc(sample_disc).path == str(sample_disc)


class TestOptions:
    def test_skip_duplicates_keeps_first(self, make_disc) -> None:
        data = mpls_bytes([play_item("00001", 0, 1), play_item("00002", 0, 1)])
        root = make_disc({"00010.mpls": data, "00011.mpls": data})
        assert len(parse_disc(root)) == 2
        catalog = parse_disc(root, skip_duplicates=True)
        assert [pl.name for pl in catalog] == ["00010.mpls"]

    def test_options_object(self, make_disc) -> None:
        data = mpls_bytes([play_item("00001", 0, 1)])
        root = make_disc({"00010.mpls": data, "00011.mpls": data})
        catalog = parse_disc(root, ParseOptions(skip_duplicates=True))
        assert len(catalog) == 1

    def test_keyword_overrides_options(self, make_disc) -> None:
        data = mpls_bytes([play_item("00001", 0, 1)])
        root = make_disc({"00010.mpls": data, "00011.mpls": data})
        catalog = parse_disc(root, ParseOptions(skip_duplicates=True), skip_duplicates=False)
        assert len(catalog) == 2

    def test_missing_clip_rejects_only_that_playlist(self, make_disc) -> None:
        root = make_disc(
            {
                "00001.mpls": mpls_bytes([play_item("00001", 0, 1)]),
                "00002.mpls": mpls_bytes([play_item("00002", 0, 5)]),
            },
            clips=["00001"],
        )
        assert [pl.name for pl in parse_disc(root)] == ["00001.mpls"]
        unchecked = parse_disc(root, check_clip_files=False)
        assert [pl.name for pl in unchecked] == ["00002.mpls", "00001.mpls"]


class TestFailures:
    @pytest.mark.parametrize("entry", REQUIRED_ENTRIES)
    def test_missing_required_entry(self, sample_disc: Path, entry: str) -> None:
        target = sample_disc / entry
        if target.is_dir():
            shutil.rmtree(target)
        else:
            target.unlink()
        with pytest.raises(StructureError, match=entry):
            parse_disc(sample_disc)

    @pytest.mark.parametrize("entry", ["CLIPINF", "PLAYLIST", "STREAM"])
    def test_required_dir_replaced_by_file(self, sample_disc: Path, entry: str) -> None:
        target = sample_disc / entry
        shutil.rmtree(target)
        target.write_bytes(b"")
        with pytest.raises(StructureError, match=f"{entry} is not a directory"):
            parse_disc(sample_disc)

    def test_no_valid_playlists(self, make_disc) -> None:
        root = make_disc({"00001.mpls": b"garbage", "00002.mpls": b""})
        with pytest.raises(StructureError, match="no playable playlists"):
            parse_disc(root)

    def test_empty_playlist_dir(self, make_disc) -> None:
        with pytest.raises(StructureError):
            parse_disc(make_disc({}))


class TestRealDisc:
    def test_real_disc_catalogue(self, bdmv_path: Path) -> None:
        catalog = parse_disc(bdmv_path, check_clip_files=False)
        durations = [pl.duration for pl in catalog]
        assert durations == sorted(durations, reverse=True)
