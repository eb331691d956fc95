"""Interaction state: hover, selection, search and filters over a built graph."""

import logging
from dataclasses import dataclass, field

from schemamap.graph.model import MetadataGraph
from schemamap.models import EdgeKey

logger = logging.getLogger(__name__)


@dataclass
class InteractionState:
    """Ephemeral UI state, mutated only by discrete events.

    The four facets (hover, selection, search, filters) are independent;
    ``schemamap.interaction.visibility`` combines them into per-node and
    per-edge display decisions.

    With ``multi_select`` enabled, ctrl-click accumulates selected nodes and
    hovering hides unrelated nodes; otherwise selection is single and hover
    only dims them.
    """

    graph: MetadataGraph
    multi_select: bool = True

    # Hover
    hovered_node: str | None = None
    hovered_neighbors: set[str] = field(default_factory=set)
    hovered_edge: EdgeKey | None = None

    # Selection
    selected_nodes: set[str] = field(default_factory=set)
    selected_node: str | None = None  # Last clicked node, its edges are emphasized
    selected_edge: EdgeKey | None = None

    # Search
    search_query: str = ""
    suggestions: set[str] | None = None  # None when there is no active query
    focus: str | None = None  # Node the view should recenter on

    # Filters
    hidden_predicates: set[str] = field(default_factory=set)
    hidden_clusters: set[str] = field(default_factory=set)

    def reset(self, graph: MetadataGraph | None = None) -> None:
        """Clear every facet, optionally switching to a rebuilt graph."""
        if graph is not None:
            self.graph = graph
        self.hovered_node = None
        self.hovered_neighbors = set()
        self.hovered_edge = None
        self.selected_nodes = set()
        self.selected_node = None
        self.selected_edge = None
        self.search_query = ""
        self.suggestions = None
        self.focus = None
        self.hidden_predicates = set()
        self.hidden_clusters = set()

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------

    def set_hovered_node(self, uri: str | None) -> None:
        if uri is None:
            self.hovered_node = None
            self.hovered_neighbors = set()
            return
        self.hovered_neighbors = self.graph.neighbors(uri)
        self.hovered_node = uri

    def set_hovered_edge(self, key: EdgeKey | None) -> None:
        if key is not None:
            self.graph.edge(key)
        self.hovered_edge = key

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def click_node(self, uri: str, accumulate: bool = False) -> None:
        """Select a node.

        A plain click replaces the selection. With ``accumulate`` (ctrl-click)
        in multi-select mode, the node is toggled in or out of the selection.
        """
        self.graph.node(uri)
        if accumulate and self.multi_select:
            if uri in self.selected_nodes:
                self.selected_nodes.discard(uri)
                if self.selected_node == uri:
                    self.selected_node = None
                return
            self.selected_nodes.add(uri)
        else:
            self.selected_nodes = {uri}
        self.selected_node = uri

    def click_edge(self, key: EdgeKey) -> None:
        self.graph.edge(key)
        self.selected_edge = key

    def click_stage(self) -> None:
        """Click on empty space: drop node and edge selection."""
        self.selected_nodes = set()
        self.selected_node = None
        self.selected_edge = None

    @property
    def has_selection(self) -> bool:
        return bool(self.selected_nodes) or self.selected_node is not None

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def set_query(self, query: str) -> None:
        """Search node labels.

        A single match whose label equals the query exactly is selected and
        focused. Anything else becomes the suggestion set, leaving the
        selection alone. An empty query only clears suggestions.
        """
        self.search_query = query
        if not query:
            self.suggestions = None
            return

        lc_query = query.lower()
        matches = [node for node in self.graph.nodes() if lc_query in node.label.lower()]
        if len(matches) == 1 and matches[0].label == query:
            uri = matches[0].uri
            self.selected_nodes = {uri}
            self.selected_node = uri
            self.focus = uri
            self.suggestions = None
            logger.debug(f"Search '{query}' selected {uri}")
        else:
            self.suggestions = {node.uri for node in matches}

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def toggle_predicate(self, curie: str, visible: bool) -> None:
        if visible:
            self.hidden_predicates.discard(curie)
        else:
            self.hidden_predicates.add(curie)

    def show_all_predicates(self) -> None:
        self.hidden_predicates = set()

    def hide_all_predicates(self) -> None:
        self.hidden_predicates = set(self.graph.predicates)

    def toggle_cluster(self, label: str, visible: bool) -> None:
        if visible:
            self.hidden_clusters.discard(label)
        else:
            self.hidden_clusters.add(label)

    def show_all_clusters(self) -> None:
        self.hidden_clusters = set()

    def hide_all_clusters(self) -> None:
        self.hidden_clusters = set(self.graph.clusters)

    # ------------------------------------------------------------------
    # Info panels
    # ------------------------------------------------------------------

    def inspected_node(self) -> str | None:
        """Node whose details are shown: the selected one, else the hovered one."""
        return self.selected_node or self.hovered_node

    def inspected_edge(self) -> EdgeKey | None:
        """Edge whose details are shown: the selected one, else the hovered one."""
        return self.selected_edge or self.hovered_edge
