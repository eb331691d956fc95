"""Indexing of parallel edges so they can be drawn as a fan of arcs."""

import logging
import math

from schemamap.graph.model import MetadataGraph
from schemamap.models import CurveStyle, PredicateEdge

logger = logging.getLogger(__name__)

DEFAULT_EDGE_CURVATURE = 0.25
CURVATURE_AMPLITUDE = 3.5


def edge_curvature(index: int, max_index: int) -> float:
    """Curvature of the ``index``-th parallel edge out of ``max_index + 1``.

    Grows linearly with the index; the largest curvature saturates as the
    number of parallel edges grows.
    """
    if max_index <= 0:
        raise ValueError(f"Invalid max_index: {max_index}")
    if index < 0:
        return -edge_curvature(-index, max_index)
    max_curvature = (
        CURVATURE_AMPLITUDE
        * (1 - math.exp(-max_index / CURVATURE_AMPLITUDE))
        * DEFAULT_EDGE_CURVATURE
    )
    return max_curvature * index / max_index


def index_parallel_edges(graph: MetadataGraph, curved: bool = True) -> int:
    """Assign parallel index, span, curve style and curvature to every edge.

    Edges are grouped by unordered node pair and ranked in ``MetadataGraph.edges()``
    order: by insertion of the source node, then by edge insertion. The
    first edge of a group stays straight; the others curve more with each
    rank. Edges running against the first edge of their group get a negated
    curvature, since curvature is relative to edge direction.

    Args:
        graph: Graph whose edges are updated in place
        curved: If False, ranks are assigned but all edges stay straight

    Returns:
        Number of node pairs with parallel edges
    """
    groups: dict[frozenset[str], list[PredicateEdge]] = {}
    for edge in graph.edges():
        groups.setdefault(frozenset((edge.source_uri, edge.target_uri)), []).append(edge)

    parallel_groups = 0
    for siblings in groups.values():
        span = len(siblings) - 1
        if span == 0:
            edge = siblings[0]
            edge.parallel_index = 0
            edge.parallel_span = 0
            edge.curve_style = CurveStyle.STRAIGHT
            edge.curvature = 0.0
            continue

        parallel_groups += 1
        spine_source = siblings[0].source_uri
        for rank, edge in enumerate(siblings):
            edge.parallel_index = rank
            edge.parallel_span = span
            if rank == 0 or not curved:
                edge.curve_style = CurveStyle.STRAIGHT
                edge.curvature = 0.0
                continue
            curvature = edge_curvature(rank, span)
            if edge.source_uri != spine_source:
                curvature = -curvature
            edge.curve_style = CurveStyle.CURVED
            edge.curvature = curvature

    logger.debug(f"Indexed {graph.edge_count} edges, {parallel_groups} parallel groups")
    return parallel_groups
