"""Tests for the Unity YAML scene/prefab scanner."""

from pathlib import Path

from unityatlas.yaml_scanner import (
    extract_asset_references,
    extract_game_objects,
    extract_prefab_references,
    extract_script_references,
    parse_prefab,
    parse_scene,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"
ASSETS_DIR = FIXTURES_DIR / "basic_project" / "Assets"

PLAYER_GUID = "1a2b3c4d5e6f708192a3b4c5d6e7f801"
ENEMY_AI_GUID = "2b3c4d5e6f708192a3b4c5d6e7f80112"
ENEMY_PREFAB_GUID = "5e6f708192a3b4c5d6e7f80112233445"
ROCK_MAT_GUID = "6f708192a3b4c5d6e7f8011223344556"


class TestGameObjects:
    """Tests for GameObject extraction."""

    def test_game_object_with_name(self):
        """Test a GameObject document yields name and fileID."""
        content = (
            "--- !u!1 &123456\n"
            "GameObject:\n"
            "  m_ObjectHideFlags: 0\n"
            "  m_Name: Main Camera\n"
            "--- !u!4 &654321\n"
            "Transform:\n"
            "  m_GameObject: {fileID: 123456}\n"
        )

        game_objects = extract_game_objects(content)

        assert len(game_objects) == 1
        assert game_objects[0].name == "Main Camera"
        assert game_objects[0].file_id == "123456"
        assert game_objects[0].components == []
        assert game_objects[0].children == []

    def test_non_game_object_documents_are_ignored(self):
        """Test m_Name on other classes doesn't produce a GameObject."""
        content = "--- !u!114 &11400000\nMonoBehaviour:\n  m_Name: Settings\n"

        assert extract_game_objects(content) == []

    def test_game_object_without_name_is_ignored(self):
        content = "--- !u!1 &5\nGameObject:\n  m_Name: \n  m_IsActive: 1\n"

        assert extract_game_objects(content) == []

    def test_stripped_game_object(self):
        """Test a stripped header is still recognised."""
        content = "--- !u!1 &77 stripped\nGameObject:\n  m_Name: Nested\n"

        game_objects = extract_game_objects(content)

        assert [(g.name, g.file_id) for g in game_objects] == [("Nested", "77")]

    def test_crlf_line_endings(self):
        content = "--- !u!1 &9\r\nGameObject:\r\n  m_Name: Door\r\n"

        game_objects = extract_game_objects(content)

        assert [g.name for g in game_objects] == ["Door"]


class TestReferences:
    """Tests for GUID reference extraction."""

    def test_script_references_deduplicated(self):
        """Test m_Script GUIDs are collected once each."""
        content = (
            "  m_Script: {fileID: 11500000, guid: abc123, type: 3}\n"
            "  m_Script: {fileID: 11500000, guid: def456, type: 3}\n"
            "  m_Script: {fileID: 11500000, guid: abc123, type: 3}\n"
        )

        assert extract_script_references(content) == ["abc123", "def456"]

    def test_script_reference_without_guid(self):
        """Test built-in references without a guid are skipped."""
        assert extract_script_references("  m_Script: {fileID: 0}\n") == []

    def test_prefab_references(self):
        content = (
            "  m_PrefabAsset: {fileID: 0}\n"
            "  m_PrefabAsset: {fileID: 100100000, guid: ffee0011, type: 3}\n"
        )

        assert extract_prefab_references(content) == ["ffee0011"]

    def test_reference_does_not_cross_lines(self):
        """Test a block without guid doesn't borrow one from the next line."""
        content = (
            "  m_PrefabAsset: {fileID: 0}\n"
            "  m_Script: {fileID: 11500000, guid: abc123, type: 3}\n"
        )

        assert extract_prefab_references(content) == []
        assert extract_script_references(content) == ["abc123"]

    def test_asset_references(self):
        """Test every inline external reference is collected."""
        content = (
            "  m_Materials:\n"
            "  - {fileID: 2100000, guid: aaa111, type: 2}\n"
            "  - {fileID: 2100000, guid: bbb222, type: 2}\n"
            "  m_Mesh: {fileID: -4216859302048453862, guid: ccc333, type: 3}\n"
            "  m_Father: {fileID: 0}\n"
        )

        assert extract_asset_references(content) == ["aaa111", "bbb222", "ccc333"]


class TestParseScene:
    """Tests for parse_scene."""

    def test_parse_fixture_scene(self):
        """Test scanning the fixture scene."""
        content = (ASSETS_DIR / "Scenes" / "Level1.unity").read_text(encoding="utf-8")

        scene = parse_scene(content, "Assets/Scenes/Level1.unity")

        assert scene is not None
        assert scene.scene_name == "Level1"
        assert [g.name for g in scene.game_objects] == ["Player"]
        assert scene.script_references == [PLAYER_GUID]
        assert scene.prefab_references == []
        assert scene.asset_references == [PLAYER_GUID, ENEMY_PREFAB_GUID]

    def test_minimal_scene(self):
        """Test a scene holding only an m_Script block."""
        scene = parse_scene("m_Script: {fileID: 11500000, guid: abc123, type: 3}")

        assert scene.script_references == ["abc123"]
        assert scene.game_objects == []

    def test_binary_scene_returns_none(self):
        """Test binary-serialized content is not scanned."""
        assert parse_scene("UnityFS\x00\x00\x07binary") is None
        assert parse_scene(None) is None


class TestParsePrefab:
    """Tests for parse_prefab."""

    def test_parse_fixture_prefab(self):
        """Test the first GameObject becomes the root."""
        content = (ASSETS_DIR / "Prefabs" / "Enemy.prefab").read_text(encoding="utf-8")

        prefab = parse_prefab(content, "Assets/Prefabs/Enemy.prefab")

        assert prefab is not None
        assert prefab.prefab_name == "Enemy"
        assert prefab.root_object.name == "Enemy"
        assert prefab.root_object.file_id == "1001"
        assert [g.name for g in prefab.game_objects] == ["Enemy", "Eye Light"]
        assert prefab.components == prefab.root_object.components == []
        assert prefab.script_references == [ENEMY_AI_GUID]
        assert prefab.nested_prefab_references == []
        assert ROCK_MAT_GUID in prefab.asset_references

    def test_placeholder_root(self):
        """Test a prefab without GameObjects gets a placeholder root."""
        prefab = parse_prefab("%YAML 1.1\n", "Assets/Prefabs/Empty Thing.prefab")

        assert prefab.root_object.name == "Empty Thing"
        assert prefab.root_object.file_id == "0"
        assert prefab.root_object.components == []
        assert prefab.root_object.children == []
        assert prefab.components == []

    def test_nested_prefab_references(self):
        content = (
            "--- !u!1 &1\nGameObject:\n  m_Name: Holder\n"
            "  m_PrefabAsset: {fileID: 100100000, guid: 0123abcd, type: 3}\n"
        )

        prefab = parse_prefab(content, "Holder.prefab")

        assert prefab.nested_prefab_references == ["0123abcd"]

    def test_binary_prefab_returns_none(self):
        assert parse_prefab("\x00\x01", "Broken.prefab") is None
