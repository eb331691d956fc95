"""Pure display decisions for the renderer, evaluated per node/edge on redraw.

Precedence, highest first:
1. Explicit filters (hidden predicates, hidden clusters) hide
2. Selection and search: selected elements are shown, search mismatches hidden
3. Hover: elements unrelated to the hovered node are hidden (or dimmed)
4. Visible
An element kept visible by a rule is never hidden by a lower one.
"""

from dataclasses import dataclass
from enum import Enum

from schemamap.graph.model import MetadataGraph
from schemamap.interaction.state import InteractionState
from schemamap.models import EdgeKey, PredicateEdge


class EdgeEmphasis(str, Enum):
    """Highlight applied to a visible edge."""

    NONE = "none"
    SELECTED_NODE = "selected_node"  # Touches the last clicked node
    SELECTED_EDGE = "selected_edge"  # Is the clicked edge


@dataclass(frozen=True)
class NodeDisplay:
    """How the renderer should draw a node."""

    hidden: bool = False
    dimmed: bool = False  # Greyed out, label removed
    highlighted: bool = False
    force_label: bool = False

    def to_dict(self) -> dict:
        return {
            "hidden": self.hidden,
            "dimmed": self.dimmed,
            "highlighted": self.highlighted,
            "force_label": self.force_label,
        }


@dataclass(frozen=True)
class EdgeDisplay:
    """How the renderer should draw an edge."""

    hidden: bool = False
    emphasis: EdgeEmphasis = EdgeEmphasis.NONE

    def to_dict(self) -> dict:
        return {"hidden": self.hidden, "emphasis": self.emphasis.value}


HIDDEN_NODE = NodeDisplay(hidden=True)
HIDDEN_EDGE = EdgeDisplay(hidden=True)


def is_node_filtered(graph: MetadataGraph, state: InteractionState, uri: str) -> bool:
    """Whether the node's cluster is hidden by the cluster filter."""
    return bool(state.hidden_clusters) and graph.node(uri).cluster in state.hidden_clusters


def is_node_selected(state: InteractionState, uri: str) -> bool:
    """Selected directly, or an extremity of the selected edge."""
    if uri in state.selected_nodes or uri == state.selected_node:
        return True
    edge = state.selected_edge
    return edge is not None and uri in (edge.source, edge.target)


def node_display(graph: MetadataGraph, state: InteractionState, uri: str) -> NodeDisplay:
    """Display decision for one node."""
    if is_node_filtered(graph, state, uri):
        return HIDDEN_NODE

    if is_node_selected(state, uri):
        return NodeDisplay(highlighted=True)

    if state.suggestions is not None:
        if uri in state.suggestions:
            return NodeDisplay(force_label=True)
        return HIDDEN_NODE

    if (
        state.hovered_node is not None
        and uri != state.hovered_node
        and uri not in state.hovered_neighbors
    ):
        return HIDDEN_NODE if state.multi_select else NodeDisplay(dimmed=True)

    return NodeDisplay()


def edge_display(graph: MetadataGraph, state: InteractionState, key: EdgeKey) -> EdgeDisplay:
    """Display decision for one edge."""
    edge = graph.edge(key)

    if state.hidden_predicates and edge.predicate_curie in state.hidden_predicates:
        return HIDDEN_EDGE
    if is_node_filtered(graph, state, edge.source_uri) or is_node_filtered(graph, state, edge.target_uri):
        return HIDDEN_EDGE

    if key == state.selected_edge:
        return EdgeDisplay(emphasis=EdgeEmphasis.SELECTED_EDGE)

    if state.suggestions is not None and not (
        edge.source_uri in state.suggestions and edge.target_uri in state.suggestions
    ):
        return HIDDEN_EDGE

    if state.has_selection:
        if state.selected_node is not None and MetadataGraph.has_extremity(edge, state.selected_node):
            return EdgeDisplay(emphasis=EdgeEmphasis.SELECTED_NODE)
        if _touches_any(edge, state.selected_nodes):
            return EdgeDisplay()
        return HIDDEN_EDGE

    if state.hovered_node is not None and not MetadataGraph.has_extremity(edge, state.hovered_node):
        return HIDDEN_EDGE

    return EdgeDisplay()


def _touches_any(edge: PredicateEdge, uris: set[str]) -> bool:
    return edge.source_uri in uris or edge.target_uri in uris
