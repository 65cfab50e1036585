"""Tests for the directory listings."""

from __future__ import annotations

import pytest

from songshelf.exceptions import DirectoryUnavailable
from songshelf.library import list_albums, list_audio_files


class TestListAudioFiles:
    def test_returns_only_mp3_files(self, songs_root):
        album = songs_root / "Live"
        album.mkdir()
        (album / "Encore - Band.mp3").touch()
        (album / "Intro - Band.mp3").touch()
        (album / "cover.jpg").touch()
        (album / "notes.txt").touch()
        assert sorted(list_audio_files(songs_root, "Live")) == [
            "Encore - Band.mp3",
            "Intro - Band.mp3",
        ]

    def test_extension_match_is_case_sensitive(self, songs_root):
        album = songs_root / "Mixed"
        album.mkdir()
        (album / "loud.MP3").touch()
        (album / "quiet.mp3").touch()
        assert list_audio_files(songs_root, "Mixed") == ["quiet.mp3"]

    def test_empty_album(self, songs_root):
        (songs_root / "Empty").mkdir()
        assert list_audio_files(songs_root, "Empty") == []

    def test_missing_album_is_an_error(self, songs_root):
        with pytest.raises(DirectoryUnavailable) as exc_info:
            list_audio_files(songs_root, "Ghost")
        assert exc_info.value.path.endswith("Ghost")

    def test_album_that_is_a_file_is_an_error(self, songs_root):
        (songs_root / "flat.mp3").touch()
        with pytest.raises(DirectoryUnavailable):
            list_audio_files(songs_root, "flat.mp3")

    @pytest.mark.parametrize("album", ["..", ".", "../..", "Live/../.."])
    def test_parent_references_are_refused(self, songs_root, album):
        (songs_root.parent / "outside.mp3").touch()
        with pytest.raises(DirectoryUnavailable):
            list_audio_files(songs_root, album)


class TestListAlbums:
    def test_lists_directories_only(self, songs_root):
        (songs_root / "Live").mkdir()
        (songs_root / "Studio").mkdir()
        (songs_root / "stray.mp3").touch()
        assert sorted(list_albums(songs_root)) == ["Live", "Studio"]

    def test_excludes_default_album(self, songs_root):
        (songs_root / "default").mkdir()
        (songs_root / "Live").mkdir()
        assert list_albums(songs_root) == ["Live"]

    def test_only_default_gives_empty_list(self, songs_root):
        (songs_root / "default").mkdir()
        assert list_albums(songs_root) == []

    def test_missing_root_is_an_error(self, tmp_path):
        with pytest.raises(DirectoryUnavailable):
            list_albums(tmp_path / "nope")
