"""Tests for structural analysis, placement statistics and graph adapters."""

import networkx as nx
import pytest
from vegetation_lib.adapters.networkx_adapter import from_networkx_graph, to_networkx_graph
from vegetation_lib.analysis.placement_stats import compute_placement_stats
from vegetation_lib.analysis.structure import check_skeleton_validity, compute_skeleton_stats
from vegetation_lib.core.result import ErrorCode, OperationResult
from vegetation_lib.core.skeleton import TreeSkeleton
from vegetation_lib.ops.placement import generate_tree_placements
from vegetation_lib.ops.radius_solver import solve_branch_radii
from vegetation_lib.ops.space_colonization import grow_skeleton
from vegetation_lib.params.config import RadiusConfig


@pytest.fixture
def solved_skeleton(small_species, growth):
    skeleton = grow_skeleton(small_species, growth, seed=31)
    return solve_branch_radii(skeleton, RadiusConfig())


def test_valid_skeleton_passes(solved_skeleton):
    result = check_skeleton_validity(solved_skeleton)
    assert result.is_success()
    assert result.errors == []
    assert result.metadata["reachable_nodes"] == len(solved_skeleton.nodes)


def test_empty_skeleton_is_valid():
    assert check_skeleton_validity(TreeSkeleton()).is_success()


def test_depth_mismatch_detected(solved_skeleton):
    leaf = solved_skeleton.terminal_node_ids[0]
    solved_skeleton.nodes[leaf].depth += 2
    result = check_skeleton_validity(solved_skeleton)
    assert result.is_failure()
    assert ErrorCode.DEPTH_MISMATCH.value in result.error_codes


def test_cycle_detected(solved_skeleton):
    leaf = solved_skeleton.terminal_node_ids[0]
    solved_skeleton.nodes[leaf].children.append(solved_skeleton.root_id)
    result = check_skeleton_validity(solved_skeleton)
    assert result.is_failure()
    assert ErrorCode.CYCLE_DETECTED.value in result.error_codes


def test_shared_child_detected(solved_skeleton):
    leaf = solved_skeleton.terminal_node_ids[0]
    other = solved_skeleton.terminal_node_ids[1]
    solved_skeleton.nodes[leaf].children.append(other)
    result = check_skeleton_validity(solved_skeleton, check_radii=False)
    assert ErrorCode.CYCLE_DETECTED.value in result.error_codes
    assert ErrorCode.TERMINALS_MISMATCH.value in result.error_codes


def test_stale_terminals_detected(solved_skeleton):
    solved_skeleton.terminal_node_ids = solved_skeleton.terminal_node_ids[1:]
    result = check_skeleton_validity(solved_skeleton)
    assert ErrorCode.TERMINALS_MISMATCH.value in result.error_codes


def test_thick_child_detected(solved_skeleton):
    leaf = solved_skeleton.terminal_node_ids[0]
    solved_skeleton.nodes[leaf].radius = 10.0
    result = check_skeleton_validity(solved_skeleton)
    assert ErrorCode.RADIUS_NOT_MONOTONIC.value in result.error_codes
    assert check_skeleton_validity(solved_skeleton, check_radii=False).is_success()


def test_skeleton_stats(solved_skeleton):
    stats = compute_skeleton_stats(solved_skeleton)
    assert stats["reachable_nodes"] + stats["pruned_nodes"] == stats["allocated_nodes"]
    assert stats["terminal_count"] == len(solved_skeleton.terminal_node_ids)
    assert stats["max_depth"] == solved_skeleton.max_depth()
    assert stats["height"] > 0.0
    assert stats["root_radius"] == pytest.approx(solved_skeleton.root.radius)
    assert sum(stats["child_count_histogram"].values()) == stats["reachable_nodes"]


def test_skeleton_stats_total_length(small_species, growth):
    """Every segment is one growth step long."""
    skeleton = grow_skeleton(small_species, growth, seed=32)
    stats = compute_skeleton_stats(skeleton)
    edges = stats["reachable_nodes"] - 1
    assert stats["total_length"] == pytest.approx(growth.step_size * edges)


def test_to_networkx_graph(solved_skeleton):
    G = to_networkx_graph(solved_skeleton)
    assert isinstance(G, nx.DiGraph)
    assert G.number_of_nodes() == len(solved_skeleton.reachable_node_ids())
    assert G.number_of_edges() == G.number_of_nodes() - 1
    assert nx.is_arborescence(G)
    assert G.graph["root"] == solved_skeleton.root_id
    for node_id in G.nodes():
        assert G.nodes[node_id]["radius"] == solved_skeleton.nodes[node_id].radius


def test_graph_excludes_pruned_nodes(small_species, growth):
    skeleton = grow_skeleton(small_species, growth, seed=33)
    solve_branch_radii(
        skeleton,
        RadiusConfig(twig_radius=0.03, min_kept_radius=0.05, trunk_preserve_depth=4),
    )
    G = to_networkx_graph(skeleton)
    assert G.number_of_nodes() == len(skeleton.reachable_node_ids()) < len(skeleton.nodes)


def test_networkx_round_trip(solved_skeleton):
    restored = from_networkx_graph(to_networkx_graph(solved_skeleton))
    assert len(restored.nodes) == len(solved_skeleton.nodes)
    for original, copy in zip(solved_skeleton.nodes, restored.nodes):
        assert copy.parent_id == original.parent_id
        assert copy.depth == original.depth
        assert sorted(copy.children) == sorted(original.children)
        assert copy.radius == pytest.approx(original.radius)
    assert restored.terminal_node_ids == solved_skeleton.terminal_node_ids


def test_from_networkx_rejects_forest():
    G = nx.DiGraph()
    G.add_nodes_from([0, 1, 2])
    G.add_edge(0, 1)
    with pytest.raises(ValueError):
        from_networkx_graph(G)


def test_placement_stats(open_field_config, flat_terrain):
    placements = generate_tree_placements(open_field_config, flat_terrain)
    stats = compute_placement_stats(placements, open_field_config)
    field = open_field_config.placement

    assert stats["count"] == len(placements)
    assert stats["min_spacing"] >= field.min_spacing
    assert stats["spacing_violations"] == 0
    assert stats["max_radial_distance"] <= field.field_radius
    assert stats["min_radial_distance"] >= field.clearing_radius
    assert stats["fill_ratio"] == pytest.approx(len(placements) / field.tree_count)
    assert sum(stats["species_counts"].values()) == len(placements)


def test_placement_stats_empty():
    stats = compute_placement_stats([])
    assert stats["count"] == 0
    assert stats["species_counts"] == {}


def test_operation_result_round_trip():
    result = OperationResult.partial_success("short")
    result.add_warning("placed 3 of 5", ErrorCode.PLACEMENT_UNDERFILLED)
    restored = OperationResult.from_dict(result.to_dict())
    assert restored == result
    assert restored.is_success()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
