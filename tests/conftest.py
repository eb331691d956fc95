"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from schemamap.config import Settings
from schemamap.graph.builder import GraphBuilder
from schemamap.graph.model import MetadataGraph
from schemamap.models import StatRow
from schemamap.namespaces import PrefixTable
from schemamap.overview import SchemaOverview
from schemamap.sparql.client import SparqlClient

EX = "http://example.org/"
XSD = "http://www.w3.org/2001/XMLSchema#"
ENDPOINT = "https://example.org/sparql"


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return Settings(
        overview_endpoints=ENDPOINT,
        layout_iterations=5,
    )


@pytest.fixture
def prefixes() -> PrefixTable:
    """Prefix table for the example namespaces."""
    return {
        EX: "ex",
        XSD: "xsd",
        "http://www.w3.org/1999/02/22-rdf-syntax-ns#": "rdf",
        "http://www.w3.org/2000/01/rdf-schema#": "rdfs",
    }


@pytest.fixture
def sample_rows() -> list[StatRow]:
    """A small protein-like schema.

    Protein -> Gene (encodedBy), Protein -> Organism (organism),
    Gene -> Organism (organism), Protein -> Gene (relatedTo, parallel to encodedBy),
    Protein has a string mnemonic.
    """
    return [
        StatRow(
            subject_class=f"{EX}Protein",
            prop=f"{EX}encodedBy",
            object_class=f"{EX}Gene",
            triples=100,
            subject_class_label="Protein",
            object_class_label="Gene",
            subject_class_top_parent_label="Biomolecule",
            object_class_top_parent_label="Biomolecule",
        ),
        StatRow(
            subject_class=f"{EX}Protein",
            prop=f"{EX}organism",
            object_class=f"{EX}Organism",
            triples=50,
            subject_class_label="Protein",
            object_class_label="Organism",
            subject_class_top_parent_label="Biomolecule",
            object_class_top_parent=f"{EX}Taxon",
        ),
        StatRow(
            subject_class=f"{EX}Gene",
            prop=f"{EX}organism",
            object_class=f"{EX}Organism",
            triples=20,
            subject_class_label="Gene",
            object_class_label="Organism",
            subject_class_top_parent_label="Biomolecule",
            object_class_top_parent=f"{EX}Taxon",
        ),
        StatRow(
            subject_class=f"{EX}Protein",
            prop=f"{EX}relatedTo",
            object_class=f"{EX}Gene",
            triples=10,
            subject_class_label="Protein",
            object_class_label="Gene",
        ),
        StatRow(
            subject_class=f"{EX}Protein",
            prop=f"{EX}mnemonic",
            object_datatype=f"{XSD}string",
            triples=100,
        ),
    ]


@pytest.fixture
def built_graph(sample_rows: list[StatRow], prefixes: PrefixTable) -> MetadataGraph:
    """Graph built from the sample rows, before clustering."""
    graph = MetadataGraph()
    GraphBuilder(graph, prefixes=prefixes, fallback_weight=5).build(
        sample_rows, show_metadata=False, endpoint=ENDPOINT
    )
    return graph


@pytest.fixture
def mock_sparql_client(sample_rows: list[StatRow], prefixes: PrefixTable) -> SparqlClient:
    """Mock SPARQL client returning the sample rows without network access."""
    client = MagicMock(spec=SparqlClient)
    client.fetch_statistics = AsyncMock(return_value=sample_rows)
    client.fetch_prefixes = AsyncMock(return_value=prefixes)
    client.close = AsyncMock()
    return client


@pytest.fixture
def overview(sample_rows: list[StatRow], prefixes: PrefixTable) -> SchemaOverview:
    """Rich overview built from the sample rows."""
    ov = SchemaOverview(endpoints=ENDPOINT, client=MagicMock(spec=SparqlClient), rich=True, show_metadata=False)
    ov.set_rows(ENDPOINT, sample_rows, prefixes)
    ov.rebuild()
    return ov
