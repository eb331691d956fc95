"""Incremental construction of the class/predicate graph from statistics rows."""

import logging
from collections.abc import Iterable

from schemamap.config import settings
from schemamap.graph.model import CITATION_CLUSTER, METADATA_CLUSTER, OTHER_CLUSTER, MetadataGraph
from schemamap.models import (
    ClassNode,
    ClusterSource,
    DatatypeFact,
    EdgeKey,
    PredicateEdge,
    PredicateUsage,
    StatRow,
)
from schemamap.namespaces import PrefixTable, compress_uri, is_metadata_uri

logger = logging.getLogger(__name__)


def resolve_cluster_source(
    uri: str,
    top_parent: str | None,
    top_parent_label: str | None,
) -> ClusterSource:
    """Pick the first applicable cluster source for a class."""
    if is_metadata_uri(uri):
        return ClusterSource.METADATA
    if top_parent_label:
        return ClusterSource.TOP_PARENT_LABEL
    if top_parent:
        return ClusterSource.TOP_PARENT_CURIE
    # Groups UniProt citation classes that have no declared ancestor
    if "Citation" in uri:
        return ClusterSource.CITATION_HEURISTIC
    return ClusterSource.FALLBACK


class GraphBuilder:
    """Builds a MetadataGraph from VoID statistics rows.

    Rows from several endpoints can be fed one endpoint at a time; the first
    endpoint introducing a class owns its label, comment and cluster, later
    rows only add counts, datatypes and edges.

    Repeated (subject, predicate, object) rows merge into one edge whose
    occurrence count accumulates the row weights.
    """

    def __init__(
        self,
        graph: MetadataGraph,
        prefixes: PrefixTable | None = None,
        fallback_weight: int | None = None,
        default_node_size: float | None = None,
    ) -> None:
        self.graph = graph
        self.prefixes: PrefixTable = prefixes if prefixes is not None else {}
        self.fallback_weight = fallback_weight if fallback_weight is not None else settings.fallback_weight
        self.default_node_size = default_node_size if default_node_size is not None else settings.default_node_size

    def curie(self, uri: str) -> str:
        return compress_uri(self.prefixes, uri)

    def cluster_for(self, uri: str, top_parent: str | None, top_parent_label: str | None) -> str:
        """Cluster key for a class, following ClusterSource precedence."""
        source = resolve_cluster_source(uri, top_parent, top_parent_label)
        if source is ClusterSource.METADATA:
            return METADATA_CLUSTER
        if source is ClusterSource.TOP_PARENT_LABEL:
            return top_parent_label  # type: ignore[return-value]
        if source is ClusterSource.TOP_PARENT_CURIE:
            return self.curie(top_parent)  # type: ignore[arg-type]
        if source is ClusterSource.CITATION_HEURISTIC:
            return CITATION_CLUSTER
        return OTHER_CLUSTER

    def build(self, rows: Iterable[StatRow], show_metadata: bool, endpoint: str) -> int:
        """Ingest rows into the graph.

        Args:
            rows: Statistics rows of one endpoint
            show_metadata: Keep rows touching ontology/SHACL/VoID classes
            endpoint: Endpoint the rows come from

        Returns:
            Number of rows ingested
        """
        ingested = 0
        skipped_incomplete = 0
        for row in rows:
            if not row.is_complete():
                skipped_incomplete += 1
                continue
            if not show_metadata and (
                is_metadata_uri(row.subject_class) or is_metadata_uri(row.object_class)
            ):
                continue
            self._ingest_row(row, endpoint)
            ingested += 1

        if skipped_incomplete:
            logger.debug(f"Skipped {skipped_incomplete} incomplete rows from {endpoint}")
        logger.info(
            f"Ingested {ingested} rows from {endpoint}: "
            f"{self.graph.node_count} nodes, {self.graph.edge_count} edges"
        )
        return ingested

    def _ingest_row(self, row: StatRow, endpoint: str) -> None:
        weight = row.triples if row.triples is not None else self.fallback_weight
        subject_uri: str = row.subject_class  # type: ignore[assignment]
        prop: str = row.prop  # type: ignore[assignment]

        subject = self._ensure_node(
            uri=subject_uri,
            endpoint=endpoint,
            label=row.subject_class_label,
            comment=row.subject_class_comment,
            top_parent=row.subject_class_top_parent,
            top_parent_label=row.subject_class_top_parent_label,
        )
        subject.count += weight

        if row.object_datatype:
            subject.add_datatype(
                DatatypeFact(
                    predicate_uri=prop,
                    predicate_curie=self.curie(prop),
                    datatype_uri=row.object_datatype,
                    datatype_curie=self.curie(row.object_datatype),
                    occurrence_count=weight,
                )
            )
        elif row.object_class:
            self._ensure_node(
                uri=row.object_class,
                endpoint=endpoint,
                label=row.object_class_label,
                comment=row.object_class_comment,
                top_parent=row.object_class_top_parent,
                top_parent_label=row.object_class_top_parent_label,
            )
            self._merge_edge(row, subject_uri, row.object_class, prop, weight)

    def _ensure_node(
        self,
        uri: str,
        endpoint: str,
        label: str | None,
        comment: str | None,
        top_parent: str | None,
        top_parent_label: str | None,
    ) -> ClassNode:
        if self.graph.has_node(uri):
            return self.graph.node(uri)
        node = ClassNode(
            uri=uri,
            curie=self.curie(uri),
            cluster=self.cluster_for(uri, top_parent, top_parent_label),
            endpoint=endpoint,
            display_label=label,
            comment=comment,
            size=self.default_node_size,
        )
        self.graph.add_node(node)
        return node

    def _merge_edge(self, row: StatRow, subject_uri: str, object_uri: str, prop: str, weight: int) -> None:
        predicate_curie = self.curie(prop)
        edge = self.graph.get_edge(EdgeKey(subject_uri, object_uri, predicate_curie))
        if edge is not None:
            edge.occurrence_count += weight
        else:
            edge = PredicateEdge(
                source_uri=subject_uri,
                target_uri=object_uri,
                predicate_curie=predicate_curie,
                predicate_uri=prop,
                occurrence_count=weight,
                triples=row.triples,
                display_label=row.prop_label,
                comment=row.prop_comment,
            )
            self.graph.add_edge(edge)
            usage = self.graph.predicates.get(predicate_curie)
            if usage is None:
                self.graph.predicates[predicate_curie] = PredicateUsage(
                    curie=predicate_curie,
                    label=row.prop_label or predicate_curie,
                    count=1,
                )
            else:
                usage.count += 1

        if edge.occurrence_count > self.graph.max_occurrence:
            self.graph.max_occurrence = edge.occurrence_count

    def assign_render_sizes(
        self,
        min_size: float | None = None,
        max_size: float | None = None,
    ) -> None:
        """Scale edge sizes by occurrence relative to the largest edge."""
        min_size = min_size if min_size is not None else settings.min_edge_size
        max_size = max_size if max_size is not None else settings.max_edge_size
        largest = self.graph.max_occurrence
        for edge in self.graph.edges():
            size = edge.occurrence_count * max_size / largest if largest > 0 else min_size
            edge.render_size = max(min_size, size)
