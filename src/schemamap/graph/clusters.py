"""Cluster post-processing: membership, singleton demotion, colors, centroids."""

import logging
from collections import defaultdict

from schemamap.config import settings
from schemamap.graph.model import OTHER_CLUSTER, MetadataGraph
from schemamap.graph.palette import Palette, generate_palette
from schemamap.models import Cluster, Point

logger = logging.getLogger(__name__)


class ClusterAggregator:
    """Turns per-node cluster keys into the cluster table used for rendering.

    Steps of ``finalize``:
    1. Tally members per cluster key
    2. Move members of single-node clusters into "Other"
    3. Drop clusters left empty ("Other" is kept)
    4. Assign one palette color per cluster, and to its nodes
    5. Compute centroids from the current node positions
    """

    def __init__(self, palette: Palette | None = None, seed: str | None = None) -> None:
        self.palette = palette or generate_palette
        self.seed = seed or settings.palette_seed

    def finalize(self, graph: MetadataGraph) -> dict[str, Cluster]:
        """Build the cluster table of ``graph`` in place and return it."""
        clusters: dict[str, Cluster] = {}
        for node in graph.nodes():
            cluster = clusters.get(node.cluster)
            if cluster is None:
                cluster = clusters[node.cluster] = Cluster(label=node.cluster)
            cluster.member_count += 1

        singletons = {
            label for label, cluster in clusters.items()
            if cluster.member_count == 1 and label != OTHER_CLUSTER
        }
        if singletons:
            other = clusters.setdefault(OTHER_CLUSTER, Cluster(label=OTHER_CLUSTER))
            for node in graph.nodes():
                if node.cluster in singletons:
                    clusters[node.cluster].member_count -= 1
                    node.cluster = OTHER_CLUSTER
                    other.member_count += 1
            logger.debug(f"Moved {len(singletons)} single-node clusters into '{OTHER_CLUSTER}'")

        for label in [lbl for lbl, c in clusters.items() if c.member_count == 0]:
            if label != OTHER_CLUSTER:
                del clusters[label]

        colors = self.palette(len(clusters), self.seed)
        for cluster, color in zip(clusters.values(), colors):
            cluster.color = color
        for node in graph.nodes():
            node.color = clusters[node.cluster].color

        graph.clusters = clusters
        self.update_centroids(graph)
        logger.info(f"Finalized {len(clusters)} clusters for {graph.node_count} nodes")
        return clusters

    @staticmethod
    def update_centroids(graph: MetadataGraph) -> None:
        """Recompute each cluster centroid as the mean of its members' positions.

        Call again whenever the layout moves nodes.
        """
        positions: dict[str, list[Point]] = defaultdict(list)
        for node in graph.nodes():
            if node.x is not None and node.y is not None:
                positions[node.cluster].append(Point(node.x, node.y))

        for label, cluster in graph.clusters.items():
            cluster.positions = positions.get(label, [])
            if cluster.positions:
                n = len(cluster.positions)
                cluster.centroid = Point(
                    sum(p.x for p in cluster.positions) / n,
                    sum(p.y for p in cluster.positions) / n,
                )
            else:
                cluster.centroid = None
