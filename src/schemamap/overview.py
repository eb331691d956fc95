"""Schema overview: fetches endpoint statistics, builds the graph, routes events.

Pipeline on every (re)build:
1. Rows of every endpoint -> GraphBuilder
2. Edge render sizes
3. ClusterAggregator.finalize (singleton demotion, colors, centroids)
4. Initial cluster positions, parallel-edge indexing
5. Optional layout pass, centroid refresh
Interaction events then mutate InteractionState and trigger a renderer refresh.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from schemamap.config import settings
from schemamap.graph.builder import GraphBuilder
from schemamap.graph.clusters import ClusterAggregator
from schemamap.graph.layout import LayoutEngine, seed_cluster_positions
from schemamap.graph.model import MetadataGraph
from schemamap.graph.palette import Palette
from schemamap.graph.parallel import index_parallel_edges
from schemamap.interaction.state import InteractionState
from schemamap.interaction.visibility import EdgeDisplay, NodeDisplay, edge_display, node_display
from schemamap.models import EdgeKey, StatRow
from schemamap.namespaces import PrefixTable, merge_prefixes
from schemamap.sparql.client import SparqlClient

logger = logging.getLogger(__name__)


class NoEndpointError(ValueError):
    """Raised when an overview is created without any endpoint."""


class Renderer(Protocol):
    """The drawing side: repaints on state change, released before a rebuild."""

    def refresh(self) -> None: ...

    def kill(self) -> None: ...


@dataclass
class EndpointInfo:
    """Fetched data of one endpoint."""

    url: str
    rows: list[StatRow] | None = None  # None until fetched (or if the fetch failed)
    error: str | None = None


@dataclass
class BuildReport:
    """Outcome of a graph (re)build."""

    rows_ingested: int
    node_count: int
    edge_count: int
    cluster_count: int
    usable: bool  # False when fewer than two nodes were built

    def to_dict(self) -> dict:
        return {
            "rows_ingested": self.rows_ingested,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "cluster_count": self.cluster_count,
            "usable": self.usable,
        }


def parse_endpoints(endpoints: str | list[str]) -> list[str]:
    """Accept a comma separated string or a list, drop blanks and duplicates."""
    if isinstance(endpoints, str):
        endpoints = endpoints.split(",")
    seen: dict[str, None] = {}
    for endpoint in endpoints:
        endpoint = endpoint.strip()
        if endpoint:
            seen[endpoint] = None
    return list(seen)


class SchemaOverview:
    """Overview of the classes and predicates of one or more SPARQL endpoints."""

    def __init__(
        self,
        endpoints: str | list[str],
        client: SparqlClient | None = None,
        show_metadata: bool | None = None,
        rich: bool | None = None,
        palette: Palette | None = None,
        layout: LayoutEngine | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        urls = parse_endpoints(endpoints)
        if not urls:
            raise NoEndpointError(
                "No endpoint provided. Configure at least one SPARQL endpoint URL."
            )
        self.endpoints: dict[str, EndpointInfo] = {url: EndpointInfo(url=url) for url in urls}
        self.client = client or SparqlClient()
        self.show_metadata = settings.show_metadata if show_metadata is None else show_metadata
        self.rich = settings.rich_overview if rich is None else rich
        self.aggregator = ClusterAggregator(palette=palette)
        self.layout = layout
        self.renderer = renderer

        self.prefixes: PrefixTable = {}
        self.graph = MetadataGraph()
        self.state = InteractionState(graph=self.graph, multi_select=self.rich)
        self.last_report: BuildReport | None = None
        self._generation = 0

    @property
    def endpoint_urls(self) -> list[str]:
        return list(self.endpoints)

    # ------------------------------------------------------------------
    # Loading and building
    # ------------------------------------------------------------------

    async def load(self) -> BuildReport | None:
        """Fetch every endpoint concurrently, then build the graph.

        Returns None if a newer load started while this one was fetching;
        its results are discarded.
        """
        self._generation += 1
        generation = self._generation

        results = await asyncio.gather(*(self._fetch_endpoint(url) for url in self.endpoints))

        if generation != self._generation:
            logger.warning(f"Discarding results of superseded load #{generation}")
            return None

        for url, (rows, prefixes, error) in zip(self.endpoints, results):
            info = self.endpoints[url]
            # A failed endpoint contributes nothing, not its previous rows
            info.rows = rows
            info.error = error
            if prefixes:
                merge_prefixes(self.prefixes, prefixes)

        return self.rebuild()

    async def _fetch_endpoint(
        self, url: str
    ) -> tuple[list[StatRow] | None, PrefixTable | None, str | None]:
        """Fetch rows and prefixes of one endpoint, as (rows, prefixes, error)."""
        try:
            rows, prefixes = await asyncio.gather(
                self.client.fetch_statistics(url),
                self.client.fetch_prefixes(url),
            )
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Could not fetch metadata of {url}: {e}")
            return None, None, str(e)
        return rows, prefixes, None

    def set_rows(self, url: str, rows: list[StatRow], prefixes: PrefixTable | None = None) -> None:
        """Provide already-fetched rows for an endpoint (no network access)."""
        if url not in self.endpoints:
            raise KeyError(url)
        self.endpoints[url].rows = list(rows)
        if prefixes:
            merge_prefixes(self.prefixes, prefixes)

    def rebuild(self) -> BuildReport:
        """Rebuild the whole graph from the fetched rows and reset interaction state."""
        if self.renderer is not None:
            self.renderer.kill()

        graph = MetadataGraph()
        builder = GraphBuilder(graph, prefixes=self.prefixes)
        rows_ingested = 0
        for url, info in self.endpoints.items():
            if info.rows is None:
                continue
            rows_ingested += builder.build(info.rows, show_metadata=self.show_metadata, endpoint=url)

        self.graph = graph
        self.state.reset(graph)

        if graph.node_count < 2:
            logger.warning(f"No VoID description found in endpoint(s) {', '.join(self.endpoint_urls)}")
            self.last_report = BuildReport(
                rows_ingested=rows_ingested,
                node_count=graph.node_count,
                edge_count=graph.edge_count,
                cluster_count=0,
                usable=False,
            )
            return self.last_report

        builder.assign_render_sizes()
        self.aggregator.finalize(graph)
        seed_cluster_positions(graph)
        ClusterAggregator.update_centroids(graph)
        index_parallel_edges(graph, curved=self.rich)
        if self.layout is not None:
            self.layout.run(graph)
            ClusterAggregator.update_centroids(graph)

        self.last_report = BuildReport(
            rows_ingested=rows_ingested,
            node_count=graph.node_count,
            edge_count=graph.edge_count,
            cluster_count=len(graph.clusters),
            usable=True,
        )
        logger.info(
            f"Overview ready: {graph.node_count} classes, {graph.edge_count} predicates, "
            f"{len(graph.clusters)} clusters"
        )
        self._refresh()
        return self.last_report

    def set_show_metadata(self, show: bool) -> BuildReport:
        """Toggle metadata classes; the graph is rebuilt from scratch."""
        self.show_metadata = show
        return self.rebuild()

    def update_positions(self, positions: dict[str, tuple[float, float]]) -> None:
        """Apply node positions from an external layout and refresh centroids."""
        for uri, (x, y) in positions.items():
            node = self.graph.node(uri)
            node.x = x
            node.y = y
        ClusterAggregator.update_centroids(self.graph)
        self._refresh()

    def _refresh(self) -> None:
        if self.renderer is not None:
            self.renderer.refresh()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def hover_node(self, uri: str | None) -> None:
        self.state.set_hovered_node(uri)
        self._refresh()

    def hover_edge(self, key: EdgeKey | None) -> None:
        self.state.set_hovered_edge(key)
        self._refresh()

    def click_node(self, uri: str, accumulate: bool = False) -> None:
        self.state.click_node(uri, accumulate=accumulate)
        self._refresh()

    def click_edge(self, key: EdgeKey) -> None:
        self.state.click_edge(key)
        self._refresh()

    def click_stage(self) -> None:
        self.state.click_stage()
        self._refresh()

    def search(self, query: str) -> None:
        self.state.set_query(query)
        self._refresh()

    def toggle_predicate(self, curie: str, visible: bool) -> None:
        self.state.toggle_predicate(curie, visible)
        self._refresh()

    def set_all_predicates(self, visible: bool) -> None:
        if visible:
            self.state.show_all_predicates()
        else:
            self.state.hide_all_predicates()
        self._refresh()

    def toggle_cluster(self, label: str, visible: bool) -> None:
        self.state.toggle_cluster(label, visible)
        self._refresh()

    def set_all_clusters(self, visible: bool) -> None:
        if visible:
            self.state.show_all_clusters()
        else:
            self.state.hide_all_clusters()
        self._refresh()

    # ------------------------------------------------------------------
    # Rendering side
    # ------------------------------------------------------------------

    def node_display(self, uri: str) -> NodeDisplay:
        return node_display(self.graph, self.state, uri)

    def edge_display(self, key: EdgeKey) -> EdgeDisplay:
        return edge_display(self.graph, self.state, key)

    def node_details(self, uri: str) -> dict[str, Any]:
        """Info panel content for a node."""
        node = self.graph.node(uri)
        data = node.to_dict()
        cluster = self.graph.clusters.get(node.cluster)
        data["cluster_color"] = cluster.color if cluster else None
        data["neighbors"] = sorted(self.graph.neighbors(uri))
        return data

    def edge_details(self, key: EdgeKey) -> dict[str, Any]:
        """Info panel content for an edge, with the labels of both ends."""
        edge = self.graph.edge(key)
        data = edge.to_dict()
        data["source_label"] = self.graph.node(edge.source_uri).label
        data["target_label"] = self.graph.node(edge.target_uri).label
        return data

    def snapshot(self) -> dict[str, Any]:
        """Everything a renderer needs for one redraw."""
        nodes = []
        for node in self.graph.nodes():
            data = node.to_dict()
            data["display"] = self.node_display(node.uri).to_dict()
            nodes.append(data)
        edges = []
        for edge in self.graph.edges():
            data = edge.to_dict()
            data["display"] = self.edge_display(edge.key).to_dict()
            edges.append(data)

        state = self.state
        inspected_node = state.inspected_node()
        inspected_edge = state.inspected_edge()
        return {
            "endpoints": [
                {"url": info.url, "rows": len(info.rows) if info.rows is not None else None, "error": info.error}
                for info in self.endpoints.values()
            ],
            "show_metadata": self.show_metadata,
            "report": self.last_report.to_dict() if self.last_report else None,
            "nodes": nodes,
            "edges": edges,
            "clusters": [c.to_dict() for c in self.graph.cluster_filter_items()],
            "predicates": [p.to_dict() for p in self.graph.predicate_filter_items()],
            "search_labels": self.graph.search_labels(),
            "state": {
                "hovered_node": state.hovered_node,
                "selected_nodes": sorted(state.selected_nodes),
                "selected_node": state.selected_node,
                "selected_edge": list(state.selected_edge) if state.selected_edge else None,
                "search_query": state.search_query,
                "suggestions": sorted(state.suggestions) if state.suggestions is not None else None,
                "focus": state.focus,
                "hidden_predicates": sorted(state.hidden_predicates),
                "hidden_clusters": sorted(state.hidden_clusters),
            },
            "inspected_node": self.node_details(inspected_node) if inspected_node else None,
            "inspected_edge": self.edge_details(inspected_edge) if inspected_edge else None,
        }
