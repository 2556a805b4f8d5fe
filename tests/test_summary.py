"""Tests for project summary statistics."""

import logging

from unityatlas.asset_tracker import analyze_project_dir
from unityatlas.asset_types import AssetType, detect_asset_type
from unityatlas.models import Asset, AssetDependency, DependencyType, ProjectStructure
from unityatlas.script_parser import ScriptInfo
from unityatlas.summary import (
    calculate_dependency_depth,
    categorize_script,
    generate_project_summary,
    rank_referenced_assets,
)


def make_asset(guid, path=None):
    path = path or f"Assets/{guid}.prefab"
    return Asset(
        id=f"id-{guid}",
        path=path,
        type=detect_asset_type(path),
        guid=guid,
        content_hash="0" * 64,
    )


def dep(source, target, dependency_type=DependencyType.PREFAB_INSTANCE):
    return AssetDependency(source, target, dependency_type)


def chain(*guids):
    return [dep(a, b) for a, b in zip(guids, guids[1:])]


class TestCategorizeScript:
    """Tests for script categorization."""

    def test_monobehaviour(self):
        assert categorize_script(["MonoBehaviour"]) == "MonoBehaviour"

    def test_scriptable_object(self):
        assert categorize_script(["ScriptableObject"]) == "ScriptableObject"

    def test_other(self):
        assert categorize_script([]) == "Other"
        assert categorize_script(["IDisposable"]) == "Other"

    def test_monobehaviour_wins(self):
        assert categorize_script(["ScriptableObject", "MonoBehaviour"]) == "MonoBehaviour"

    def test_substring_match(self):
        """Test qualified base type names still count."""
        assert categorize_script(["UnityEngine.MonoBehaviour"]) == "MonoBehaviour"


class TestRankReferencedAssets:
    """Tests for most-referenced ranking."""

    def test_ranking_excludes_unreferenced(self):
        assets = [make_asset("a"), make_asset("b"), make_asset("c")]
        deps = [dep("x", "b")] * 2 + [dep("x", "a")] * 5

        ranked = rank_referenced_assets(assets, deps)

        assert [(r.guid, r.reference_count) for r in ranked] == [("a", 5), ("b", 2)]
        assert [r.name for r in ranked] == ["a.prefab", "b.prefab"]

    def test_ties_keep_first_reference_order(self):
        deps = [dep("x", "b"), dep("x", "a"), dep("y", "a"), dep("y", "b")]

        ranked = rank_referenced_assets([make_asset("a"), make_asset("b")], deps)

        assert [r.guid for r in ranked] == ["b", "a"]

    def test_top_n(self):
        deps = [dep("x", str(i)) for i in range(20)]

        ranked = rank_referenced_assets([], deps, top_n=3)

        assert [r.guid for r in ranked] == ["0", "1", "2"]

    def test_unregistered_target_is_unknown(self):
        ranked = rank_referenced_assets([], [dep("x", "ghost")])

        assert ranked[0].name == "Unknown"
        assert ranked[0].reference_count == 1


class TestDependencyDepth:
    """Tests for the dependency depth traversal."""

    def test_no_dependencies(self):
        assets = [make_asset("a"), make_asset("b")]

        assert calculate_dependency_depth(assets, []) == (0, [])

    def test_chain(self):
        assets = [make_asset(g) for g in "abcd"]

        depth, cycles = calculate_dependency_depth(assets, chain("a", "b", "c", "d"))

        assert depth == 3
        assert cycles == []

    def test_unregistered_targets_count(self):
        """Test traversal goes through GUIDs that aren't registered assets."""
        depth, _ = calculate_dependency_depth([make_asset("a")], chain("a", "x", "y"))

        assert depth == 2

    def test_first_discovery_depth(self):
        """Test a node keeps the depth at which it was first reached."""
        assets = [make_asset(g) for g in ["c", "a"]]
        deps = chain("a", "b", "c", "d")

        depth, _ = calculate_dependency_depth(assets, deps)

        # c and d are visited from c first; a's traversal stops at c
        assert depth == 1

    def test_two_node_cycle(self, caplog):
        """Test a <-> b is broken at the edge closing the cycle."""
        assets = [make_asset("a"), make_asset("b")]
        deps = [dep("a", "b"), dep("b", "a")]

        with caplog.at_level(logging.WARNING, logger="unityatlas"):
            depth, cycles = calculate_dependency_depth(assets, deps)

        assert depth == 1
        assert cycles == [("b", "a")]
        assert "Dependency cycle broken at b -> a" in caplog.text

    def test_self_reference(self):
        depth, cycles = calculate_dependency_depth([make_asset("a")], [dep("a", "a")])

        assert depth == 0
        assert cycles == [("a", "a")]

    def test_diamond_is_not_a_cycle(self):
        assets = [make_asset(g) for g in "abcd"]
        deps = [dep("a", "b"), dep("a", "c"), dep("b", "d"), dep("c", "d")]

        depth, cycles = calculate_dependency_depth(assets, deps)

        assert depth == 2
        assert cycles == []

    def test_long_chain_does_not_recurse(self):
        guids = [f"g{i}" for i in range(5000)]

        depth, cycles = calculate_dependency_depth([make_asset(guids[0])], chain(*guids))

        assert depth == 4999
        assert cycles == []


class TestGenerateProjectSummary:
    """Tests for generate_project_summary."""

    def test_empty_structure(self):
        summary = generate_project_summary(ProjectStructure())

        assert summary.total_assets == 0
        assert summary.dependency_depth == 0
        assert summary.most_referenced_assets == []
        assert summary.script_categories == {}
        assert set(summary.asset_type_counts) == {t.value for t in AssetType}
        assert all(count == 0 for count in summary.asset_type_counts.values())

    def test_counts(self):
        structure = ProjectStructure(
            assets=[
                make_asset("s1", "Assets/A.cs"),
                make_asset("s2", "Assets/B.cs"),
                make_asset("t1", "Assets/C.png"),
            ],
            scripts=[
                ScriptInfo(class_name="A", base_types=["MonoBehaviour"]),
                ScriptInfo(class_name="B", base_types=["ScriptableObject"]),
            ],
        )

        summary = generate_project_summary(structure)

        assert summary.total_assets == 3
        assert summary.total_scripts == 2
        assert summary.asset_type_counts["script"] == 2
        assert summary.asset_type_counts["texture"] == 1
        assert summary.asset_type_counts["scene"] == 0
        assert summary.script_categories == {"MonoBehaviour": 1, "ScriptableObject": 1}

    def test_cycles_reported(self):
        structure = ProjectStructure(
            assets=[make_asset("a"), make_asset("b")],
            dependencies=[dep("a", "b"), dep("b", "a")],
        )

        summary = generate_project_summary(structure)

        assert summary.has_cycles
        assert summary.to_dict()["dependency_cycles"] == [["b", "a"]]

    def test_fixture_project(self, basic_project):
        structure = analyze_project_dir(basic_project, project_id="demo").structure

        summary = generate_project_summary(structure, top_n=2)

        assert summary.total_assets == 7
        assert summary.total_scripts == 3
        assert summary.total_scenes == 1
        assert summary.total_prefabs == 1
        assert summary.script_categories == {"MonoBehaviour": 2, "ScriptableObject": 1}
        assert summary.dependency_depth == 1
        assert summary.dependency_cycles == []
        assert len(summary.most_referenced_assets) == 2
