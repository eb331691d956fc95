"""Labeled multi-graph of classes (nodes) and predicates (edges)."""

from collections.abc import Iterator

import networkx as nx

from schemamap.models import ClassNode, Cluster, EdgeKey, PredicateEdge, PredicateUsage

OTHER_CLUSTER = "Other"
METADATA_CLUSTER = "Endpoint Metadata"
CITATION_CLUSTER = "Citation"


class MetadataGraph:
    """Class/predicate multi-graph with its cluster and predicate tables.

    Topology lives in a networkx MultiDiGraph keyed by predicate CURIE, so
    parallel edges between the same pair are allowed for distinct predicates
    and a (source, target, predicate) triple maps to at most one edge.
    """

    def __init__(self) -> None:
        self._graph = nx.MultiDiGraph()
        self.clusters: dict[str, Cluster] = {}
        self.predicates: dict[str, PredicateUsage] = {}
        self.max_occurrence = 0

    # Nodes

    def has_node(self, uri: str) -> bool:
        return self._graph.has_node(uri)

    def add_node(self, node: ClassNode) -> None:
        if self._graph.has_node(node.uri):
            raise ValueError(f"Node already exists: {node.uri}")
        self._graph.add_node(node.uri, node=node)

    def node(self, uri: str) -> ClassNode:
        """Get a node by URI, raises KeyError if unknown."""
        if not self._graph.has_node(uri):
            raise KeyError(uri)
        return self._graph.nodes[uri]["node"]

    def nodes(self) -> list[ClassNode]:
        """Nodes in insertion order."""
        return [data for _, data in self._graph.nodes(data="node")]

    def iter_uris(self) -> Iterator[str]:
        return iter(self._graph.nodes)

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def neighbors(self, uri: str) -> set[str]:
        """Direct neighbors of a node, regardless of edge direction."""
        if not self._graph.has_node(uri):
            raise KeyError(uri)
        return set(nx.all_neighbors(self._graph, uri))

    # Edges

    def get_edge(self, key: EdgeKey) -> PredicateEdge | None:
        if not self._graph.has_edge(key.source, key.target, key=key.predicate):
            return None
        return self._graph.edges[key.source, key.target, key.predicate]["edge"]

    def edge(self, key: EdgeKey) -> PredicateEdge:
        """Get an edge by key, raises KeyError if unknown."""
        edge = self.get_edge(key)
        if edge is None:
            raise KeyError(key)
        return edge

    def add_edge(self, edge: PredicateEdge) -> None:
        if self.get_edge(edge.key) is not None:
            raise ValueError(f"Edge already exists: {edge.key}")
        self._graph.add_edge(edge.source_uri, edge.target_uri, key=edge.predicate_curie, edge=edge)

    def edges(self) -> list[PredicateEdge]:
        """Edges in a stable order (by source insertion, then edge insertion)."""
        return [data for _, _, data in self._graph.edges(data="edge")]

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    @staticmethod
    def has_extremity(edge: PredicateEdge, uri: str) -> bool:
        return edge.source_uri == uri or edge.target_uri == uri

    def to_networkx(self) -> nx.MultiDiGraph:
        """Underlying topology, for layout engines."""
        return self._graph

    # Side tables

    def predicate_filter_items(self) -> list[PredicateUsage]:
        """Predicates for the filter list, most used first."""
        return sorted(self.predicates.values(), key=lambda p: p.count, reverse=True)

    def cluster_filter_items(self) -> list[Cluster]:
        """Clusters for the filter list, largest first."""
        return sorted(self.clusters.values(), key=lambda c: c.member_count, reverse=True)

    def search_labels(self) -> list[str]:
        """Node labels for search autocompletion, ordered by node URI."""
        return [self.node(uri).label for uri in sorted(self._graph.nodes)]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "nodes": [n.to_dict() for n in self.nodes()],
            "edges": [e.to_dict() for e in self.edges()],
            "clusters": [c.to_dict() for c in self.cluster_filter_items()],
            "predicates": [p.to_dict() for p in self.predicate_filter_items()],
        }
