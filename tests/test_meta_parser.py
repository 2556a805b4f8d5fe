"""Tests for .meta file parsing."""

from unityatlas.meta_parser import (
    MetaInfo,
    asset_path_for_meta,
    is_meta_path,
    parse_meta,
)


class TestParseMeta:
    """Tests for parse_meta."""

    def test_parse_guid_and_version(self):
        """Test extracting guid and fileFormatVersion."""
        content = "fileFormatVersion: 2\nguid: 1a2b3c4d5e6f708192a3b4c5d6e7f801\nMonoImporter:\n"

        info = parse_meta(content)

        assert info == MetaInfo(guid="1a2b3c4d5e6f708192a3b4c5d6e7f801", file_format_version=2)

    def test_version_defaults_to_2(self):
        """Test missing fileFormatVersion falls back to 2."""
        info = parse_meta("guid: abc123\n")

        assert info is not None
        assert info.guid == "abc123"
        assert info.file_format_version == 2

    def test_explicit_version(self):
        """Test a non-default format version is read."""
        info = parse_meta("fileFormatVersion: 3\nguid: abc123\n")

        assert info.file_format_version == 3

    def test_label_is_case_insensitive(self):
        """Test the guid label matches regardless of case."""
        info = parse_meta("GUID: ABCDEF0123\n")

        assert info is not None
        assert info.guid == "ABCDEF0123"

    def test_first_guid_wins(self):
        """Test only the first guid token is used."""
        info = parse_meta("guid: aaa111\nexternalObjects:\n  guid: bbb222\n")

        assert info.guid == "aaa111"

    def test_missing_guid_returns_none(self):
        """Test text without a guid field is not found."""
        assert parse_meta("fileFormatVersion: 2\nDefaultImporter:\n") is None

    def test_malformed_input_returns_none(self):
        """Test garbage input never raises."""
        assert parse_meta("") is None
        assert parse_meta("\x00\x01\x02") is None
        assert parse_meta(None) is None


class TestMetaPaths:
    """Tests for .meta path helpers."""

    def test_asset_path_for_meta(self):
        assert asset_path_for_meta("Assets/Player.cs.meta") == "Assets/Player.cs"

    def test_only_suffix_is_stripped(self):
        """Test a '.meta' inside the path is left alone."""
        assert asset_path_for_meta("Assets/.metadata/a.png.meta") == "Assets/.metadata/a.png"

    def test_is_meta_path(self):
        assert is_meta_path("Assets/Scenes.meta")
        assert not is_meta_path("Assets/Player.cs")

    def test_suffix_is_case_sensitive(self):
        """Test only the lower-case suffix Unity writes is a .meta file."""
        assert not is_meta_path("Assets/Player.cs.META")
        assert asset_path_for_meta("Assets/Player.cs.META") == "Assets/Player.cs.META"
