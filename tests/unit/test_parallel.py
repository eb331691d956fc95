"""Unit tests for parallel edge indexing."""

import math

import pytest

from schemamap.graph.model import MetadataGraph
from schemamap.graph.parallel import edge_curvature, index_parallel_edges
from schemamap.models import ClassNode, CurveStyle, EdgeKey, PredicateEdge

EX = "http://example.org/"


def make_graph(edges: list[tuple[str, str, str]]) -> MetadataGraph:
    graph = MetadataGraph()
    for source, target, predicate in edges:
        for name in (source, target):
            if not graph.has_node(f"{EX}{name}"):
                graph.add_node(ClassNode(uri=f"{EX}{name}", curie=f"ex:{name}", cluster="X", endpoint="e"))
        graph.add_edge(
            PredicateEdge(
                source_uri=f"{EX}{source}",
                target_uri=f"{EX}{target}",
                predicate_curie=f"ex:{predicate}",
                predicate_uri=f"{EX}{predicate}",
                occurrence_count=1,
            )
        )
    return graph


def key(source: str, target: str, predicate: str) -> EdgeKey:
    return EdgeKey(f"{EX}{source}", f"{EX}{target}", f"ex:{predicate}")


class TestEdgeCurvature:
    """Tests for edge_curvature."""

    def test_zero_index(self) -> None:
        """Test rank zero is straight."""
        assert edge_curvature(0, 3) == 0.0

    def test_monotonic(self) -> None:
        """Test curvature grows with the index."""
        values = [edge_curvature(i, 4) for i in range(5)]
        assert values == sorted(values)
        assert values[-1] > 0

    def test_max_value(self) -> None:
        """Test the curvature of the outermost edge."""
        expected = 3.5 * (1 - math.exp(-1 / 3.5)) * 0.25
        assert edge_curvature(1, 1) == pytest.approx(expected)

    def test_saturates(self) -> None:
        """Test the outermost curvature stays below amplitude * base."""
        assert edge_curvature(100, 100) < 3.5 * 0.25

    def test_negative_index(self) -> None:
        """Test negative indices mirror positive ones."""
        assert edge_curvature(-2, 3) == pytest.approx(-edge_curvature(2, 3))

    @pytest.mark.parametrize("max_index", [0, -1])
    def test_invalid_max_index(self, max_index: int) -> None:
        """Test a non-positive max index is rejected."""
        with pytest.raises(ValueError):
            edge_curvature(0, max_index)


class TestIndexParallelEdges:
    """Tests for index_parallel_edges."""

    def test_single_edge_straight(self) -> None:
        """Test a lone edge between two nodes."""
        graph = make_graph([("A", "B", "p")])
        assert index_parallel_edges(graph) == 0
        edge = graph.edge(key("A", "B", "p"))
        assert edge.parallel_index == 0
        assert edge.parallel_span == 0
        assert edge.curve_style is CurveStyle.STRAIGHT
        assert edge.curvature == 0.0

    def test_three_parallel_edges(self) -> None:
        """Test ranks, spans and curvature of a fan of three edges."""
        graph = make_graph([("A", "B", "p1"), ("A", "B", "p2"), ("A", "B", "p3")])
        assert index_parallel_edges(graph) == 1

        first, second, third = (graph.edge(key("A", "B", p)) for p in ("p1", "p2", "p3"))
        assert [e.parallel_index for e in (first, second, third)] == [0, 1, 2]
        assert all(e.parallel_span == 2 for e in (first, second, third))
        assert first.curve_style is CurveStyle.STRAIGHT
        assert second.curve_style is CurveStyle.CURVED
        assert third.curve_style is CurveStyle.CURVED
        assert 0 < second.curvature < third.curvature
        assert third.curvature == pytest.approx(edge_curvature(2, 2))

    def test_reverse_direction_grouped(self) -> None:
        """Test A->B and B->A share a group, with mirrored curvature."""
        graph = make_graph([("A", "B", "p"), ("B", "A", "q")])
        assert index_parallel_edges(graph) == 1
        reverse = graph.edge(key("B", "A", "q"))
        assert reverse.parallel_index == 1
        assert reverse.parallel_span == 1
        assert reverse.curvature == pytest.approx(-edge_curvature(1, 1))

    def test_rank_follows_source_node_order(self) -> None:
        """Test ranks follow source node insertion, not edge insertion."""
        # A is inserted before B, so A->B is ranked first although B->A was added earlier
        graph = make_graph([("A", "C", "p"), ("B", "A", "p"), ("A", "B", "q")])
        index_parallel_edges(graph)

        spine = graph.edge(key("A", "B", "q"))
        reverse = graph.edge(key("B", "A", "p"))
        assert spine.parallel_index == 0
        assert spine.curve_style is CurveStyle.STRAIGHT
        assert reverse.parallel_index == 1
        assert reverse.curvature == pytest.approx(-edge_curvature(1, 1))

    def test_legacy_straight(self) -> None:
        """Test parallel edges are ranked but not curved when disabled."""
        graph = make_graph([("A", "B", "p1"), ("A", "B", "p2")])
        index_parallel_edges(graph, curved=False)
        second = graph.edge(key("A", "B", "p2"))
        assert second.parallel_index == 1
        assert second.curve_style is CurveStyle.STRAIGHT
        assert second.curvature == 0.0

    def test_reindex_resets(self) -> None:
        """Test indexing twice yields the same result."""
        graph = make_graph([("A", "B", "p1"), ("A", "B", "p2"), ("B", "C", "p1")])
        index_parallel_edges(graph)
        before = [e.to_dict() for e in graph.edges()]
        index_parallel_edges(graph)
        assert [e.to_dict() for e in graph.edges()] == before

    def test_sample_graph(self, built_graph: MetadataGraph) -> None:
        """Test encodedBy and relatedTo form the only parallel pair."""
        assert index_parallel_edges(built_graph) == 1
        related = built_graph.edge(EdgeKey(f"{EX}Protein", f"{EX}Gene", "ex:relatedTo"))
        assert related.curve_style is CurveStyle.CURVED
        organism = built_graph.edge(EdgeKey(f"{EX}Gene", f"{EX}Organism", "ex:organism"))
        assert organism.curve_style is CurveStyle.STRAIGHT
