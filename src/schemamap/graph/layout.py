"""Initial node placement and the default force-directed layout adapter."""

import logging
import math
import random
from typing import Protocol

import networkx as nx

from schemamap.config import settings
from schemamap.graph.model import MetadataGraph

logger = logging.getLogger(__name__)


class LayoutEngine(Protocol):
    """Moves nodes; anything that sets ``x``/``y`` on every node qualifies."""

    def run(self, graph: MetadataGraph) -> None: ...


def seed_cluster_positions(
    graph: MetadataGraph,
    radius: float | None = None,
    spread: float | None = None,
    seed: int | None = None,
) -> None:
    """Place each cluster on a circle and scatter its nodes around that point.

    Gives the force layout a start where clusters are already apart.
    """
    radius = radius if radius is not None else settings.cluster_radius
    spread = spread if spread is not None else settings.cluster_spread
    rng = random.Random(seed if seed is not None else settings.layout_seed)

    cluster_count = len(graph.clusters)
    anchors: dict[str, tuple[float, float]] = {}
    for i, label in enumerate(graph.clusters):
        angle = (i * 2 * math.pi) / cluster_count
        anchors[label] = (radius * math.cos(angle), radius * math.sin(angle))

    for node in graph.nodes():
        ax, ay = anchors.get(node.cluster, (0.0, 0.0))
        offset_angle = rng.random() * 2 * math.pi
        offset_radius = rng.random() * spread
        node.x = ax + offset_radius * math.cos(offset_angle)
        node.y = ay + offset_radius * math.sin(offset_angle)


class SpringLayout:
    """Fruchterman-Reingold layout through networkx, started from current positions."""

    def __init__(
        self,
        iterations: int | None = None,
        seed: int | None = None,
        scale: float | None = None,
    ) -> None:
        self.iterations = iterations or settings.layout_iterations
        self.seed = seed if seed is not None else settings.layout_seed
        self.scale = scale or settings.cluster_radius

    def run(self, graph: MetadataGraph) -> None:
        if graph.node_count == 0:
            return

        G = nx.Graph()
        G.add_nodes_from(graph.iter_uris())
        for edge in graph.edges():
            if edge.source_uri != edge.target_uri:
                G.add_edge(edge.source_uri, edge.target_uri)

        initial = {
            node.uri: (node.x, node.y)
            for node in graph.nodes()
            if node.x is not None and node.y is not None
        }
        positions = nx.spring_layout(
            G,
            pos=initial or None,
            k=5.0 / (G.number_of_nodes() ** 0.5),
            iterations=self.iterations,
            seed=self.seed,
            scale=self.scale,
        )
        for node in graph.nodes():
            x, y = positions[node.uri]
            node.x = float(x)
            node.y = float(y)
        logger.debug(f"Spring layout done for {G.number_of_nodes()} nodes")
