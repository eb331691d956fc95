"""Schema graph construction.

Provides:
- MetadataGraph: class/predicate multi-graph with cluster and predicate tables
- GraphBuilder: ingestion of VoID statistics rows
- ClusterAggregator: singleton demotion, colors, centroids
- index_parallel_edges: curvature for parallel predicates
"""

from schemamap.graph.builder import GraphBuilder, resolve_cluster_source
from schemamap.graph.clusters import ClusterAggregator
from schemamap.graph.layout import LayoutEngine, SpringLayout, seed_cluster_positions
from schemamap.graph.model import (
    CITATION_CLUSTER,
    METADATA_CLUSTER,
    OTHER_CLUSTER,
    MetadataGraph,
)
from schemamap.graph.palette import Palette, generate_palette
from schemamap.graph.parallel import edge_curvature, index_parallel_edges

__all__ = [
    # Model
    "MetadataGraph",
    "OTHER_CLUSTER",
    "METADATA_CLUSTER",
    "CITATION_CLUSTER",
    # Pipeline
    "GraphBuilder",
    "resolve_cluster_source",
    "ClusterAggregator",
    "index_parallel_edges",
    "edge_curvature",
    # Collaborators
    "Palette",
    "generate_palette",
    "LayoutEngine",
    "SpringLayout",
    "seed_cluster_positions",
]
