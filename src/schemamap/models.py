"""Data models for the schema overview graph."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

DEFAULT_NODE_SIZE = 10.0


class CurveStyle(str, Enum):
    """How an edge is drawn."""

    STRAIGHT = "straight"
    CURVED = "curved"


class ClusterSource(str, Enum):
    """Where a node's cluster key comes from, in order of precedence."""

    METADATA = "metadata"  # "Endpoint Metadata"
    TOP_PARENT_LABEL = "top_parent_label"  # Declared label of the top ancestor
    TOP_PARENT_CURIE = "top_parent_curie"  # Compressed URI of the top ancestor
    CITATION_HEURISTIC = "citation"  # URI contains "Citation"
    FALLBACK = "fallback"  # "Other"


class EdgeKey(NamedTuple):
    """Identity of an edge: at most one edge per (source, target, predicate)."""

    source: str
    target: str
    predicate: str  # predicate CURIE


class Point(NamedTuple):
    """2D coordinates."""

    x: float
    y: float


def _binding_value(bindings: dict[str, Any], name: str) -> str | None:
    """Extract a value from a SPARQL JSON result binding, or None."""
    binding = bindings.get(name)
    if binding is None:
        return None
    if isinstance(binding, dict):
        value = binding.get("value")
    else:
        value = binding
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class StatRow:
    """One VoID-style statistics row: subject class -> predicate -> object class/datatype."""

    subject_class: str | None
    prop: str | None
    object_class: str | None = None
    object_datatype: str | None = None
    triples: int | None = None

    subject_class_label: str | None = None
    object_class_label: str | None = None
    subject_class_comment: str | None = None
    object_class_comment: str | None = None

    subject_class_top_parent: str | None = None
    subject_class_top_parent_label: str | None = None
    object_class_top_parent: str | None = None
    object_class_top_parent_label: str | None = None

    prop_label: str | None = None
    prop_comment: str | None = None

    @classmethod
    def from_bindings(cls, bindings: dict[str, Any]) -> "StatRow":
        """Create a row from one SPARQL JSON result binding."""
        triples = _binding_value(bindings, "triples")
        try:
            triples_count = int(triples) if triples is not None else None
        except ValueError:
            triples_count = None
        return cls(
            subject_class=_binding_value(bindings, "subjectClass"),
            prop=_binding_value(bindings, "prop"),
            object_class=_binding_value(bindings, "objectClass"),
            object_datatype=_binding_value(bindings, "objectDatatype"),
            triples=triples_count,
            subject_class_label=_binding_value(bindings, "subjectClassLabel"),
            object_class_label=_binding_value(bindings, "objectClassLabel"),
            subject_class_comment=_binding_value(bindings, "subjectClassComment"),
            object_class_comment=_binding_value(bindings, "objectClassComment"),
            subject_class_top_parent=_binding_value(bindings, "subjectClassTopParent"),
            subject_class_top_parent_label=_binding_value(bindings, "subjectClassTopParentLabel"),
            object_class_top_parent=_binding_value(bindings, "objectClassTopParent"),
            object_class_top_parent_label=_binding_value(bindings, "objectClassTopParentLabel"),
            prop_label=_binding_value(bindings, "propLabel"),
            prop_comment=_binding_value(bindings, "propComment"),
        )

    def is_complete(self) -> bool:
        """A row needs at least a subject class and a predicate."""
        return bool(self.subject_class) and bool(self.prop)


@dataclass
class DatatypeFact:
    """A literal-valued property observed on a class."""

    predicate_uri: str
    predicate_curie: str
    datatype_uri: str
    datatype_curie: str
    occurrence_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "predicate_uri": self.predicate_uri,
            "predicate_curie": self.predicate_curie,
            "datatype_uri": self.datatype_uri,
            "datatype_curie": self.datatype_curie,
            "occurrence_count": self.occurrence_count,
        }


@dataclass
class ClassNode:
    """A class observed in the endpoint statistics."""

    uri: str
    curie: str
    cluster: str
    endpoint: str
    display_label: str | None = None
    comment: str | None = None
    count: int = 0
    datatypes: list[DatatypeFact] = field(default_factory=list)

    # Rendering attributes
    x: float | None = None
    y: float | None = None
    size: float = DEFAULT_NODE_SIZE
    color: str | None = None

    @property
    def label(self) -> str:
        """Label shown and searched: the human label if any, else the CURIE."""
        return self.display_label or self.curie

    def add_datatype(self, fact: DatatypeFact) -> bool:
        """Add a datatype fact unless the (predicate, datatype) pair is known.

        Returns True if the fact was added.
        """
        for existing in self.datatypes:
            if existing.predicate_uri == fact.predicate_uri and existing.datatype_uri == fact.datatype_uri:
                return False
        self.datatypes.append(fact)
        return True

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "uri": self.uri,
            "curie": self.curie,
            "label": self.label,
            "display_label": self.display_label,
            "comment": self.comment,
            "cluster": self.cluster,
            "endpoint": self.endpoint,
            "count": self.count,
            "datatypes": [dt.to_dict() for dt in self.datatypes],
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "color": self.color,
        }


@dataclass
class PredicateEdge:
    """A predicate connecting two classes."""

    source_uri: str
    target_uri: str
    predicate_curie: str
    predicate_uri: str
    occurrence_count: int
    triples: int | None = None  # As declared by the first row seen
    display_label: str | None = None
    comment: str | None = None

    # Rendering attributes
    render_size: float = 2.0
    parallel_index: int = 0
    parallel_span: int = 0
    curve_style: CurveStyle = CurveStyle.STRAIGHT
    curvature: float = 0.0

    @property
    def key(self) -> EdgeKey:
        return EdgeKey(self.source_uri, self.target_uri, self.predicate_curie)

    @property
    def label(self) -> str:
        return self.display_label or self.predicate_curie

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "source": self.source_uri,
            "target": self.target_uri,
            "predicate_curie": self.predicate_curie,
            "predicate_uri": self.predicate_uri,
            "label": self.label,
            "display_label": self.display_label,
            "comment": self.comment,
            "triples": self.triples,
            "occurrence_count": self.occurrence_count,
            "render_size": self.render_size,
            "parallel_index": self.parallel_index,
            "parallel_span": self.parallel_span,
            "curve_style": self.curve_style.value,
            "curvature": self.curvature,
        }


@dataclass
class Cluster:
    """A named group of class nodes, usually sharing a top ancestor."""

    label: str
    member_count: int = 0
    color: str | None = None
    centroid: Point | None = None
    positions: list[Point] = field(default_factory=list)  # Transient, for the centroid

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "label": self.label,
            "member_count": self.member_count,
            "color": self.color,
            "centroid": {"x": self.centroid.x, "y": self.centroid.y} if self.centroid else None,
        }


@dataclass
class PredicateUsage:
    """How many distinct edges use a predicate, for the predicate filter list."""

    curie: str
    label: str
    count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"curie": self.curie, "label": self.label, "count": self.count}
