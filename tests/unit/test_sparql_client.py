"""Unit tests for the SPARQL client."""

from unittest.mock import MagicMock

import pytest
import requests

from schemamap.models import StatRow
from schemamap.sparql.client import PREFIXES_QUERY, STATISTICS_QUERY, SparqlClient

ENDPOINT = "https://example.org/sparql"


def make_response(payload: dict, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = str(payload)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


def make_client(response: MagicMock) -> SparqlClient:
    client = SparqlClient(timeout=5.0, max_concurrent=2)
    session = MagicMock()
    session.get.return_value = response
    client._session = session
    return client


class TestStatRowFromBindings:
    """Tests for StatRow.from_bindings."""

    def test_full_binding(self) -> None:
        """Test camelCase variables are mapped to row fields."""
        row = StatRow.from_bindings({
            "subjectClass": {"type": "uri", "value": "http://example.org/A"},
            "prop": {"type": "uri", "value": "http://example.org/p"},
            "objectClass": {"type": "uri", "value": "http://example.org/B"},
            "triples": {"type": "literal", "value": "42"},
            "subjectClassTopParentLabel": {"type": "literal", "value": "Top"},
        })
        assert row.subject_class == "http://example.org/A"
        assert row.object_class == "http://example.org/B"
        assert row.triples == 42
        assert row.subject_class_top_parent_label == "Top"
        assert row.object_datatype is None
        assert row.is_complete()

    def test_bad_triples(self) -> None:
        """Test a non-numeric triples count is dropped."""
        row = StatRow.from_bindings({"triples": {"value": "many"}})
        assert row.triples is None
        assert not row.is_complete()

    def test_empty_values(self) -> None:
        """Test empty strings are treated as missing."""
        row = StatRow.from_bindings({"subjectClass": {"value": ""}, "prop": {"value": "http://example.org/p"}})
        assert row.subject_class is None


class TestSparqlClient:
    """Tests for SparqlClient queries."""

    @pytest.mark.asyncio
    async def test_fetch_statistics(self) -> None:
        """Test statistics bindings become rows."""
        response = make_response({
            "head": {"vars": ["subjectClass", "prop", "objectClass", "triples"]},
            "results": {
                "bindings": [
                    {
                        "subjectClass": {"value": "http://example.org/A"},
                        "prop": {"value": "http://example.org/p"},
                        "objectClass": {"value": "http://example.org/B"},
                        "triples": {"value": "3"},
                    },
                ]
            },
        })
        client = make_client(response)

        rows = await client.fetch_statistics(ENDPOINT)

        assert len(rows) == 1
        assert rows[0].triples == 3
        client._session.get.assert_called_once_with(
            ENDPOINT,
            params={"query": STATISTICS_QUERY},
            timeout=5.0,
        )

    @pytest.mark.asyncio
    async def test_fetch_prefixes(self) -> None:
        """Test prefix bindings become a namespace -> prefix table."""
        response = make_response({
            "results": {
                "bindings": [
                    {"prefix": {"value": "up"}, "namespace": {"value": "http://purl.uniprot.org/core/"}},
                    {"prefix": {"value": "incomplete"}},
                ]
            },
        })
        client = make_client(response)

        prefixes = await client.fetch_prefixes(ENDPOINT)

        assert prefixes == {"http://purl.uniprot.org/core/": "up"}
        assert client._session.get.call_args.kwargs["params"] == {"query": PREFIXES_QUERY}

    @pytest.mark.asyncio
    async def test_http_error_propagates(self) -> None:
        """Test HTTP errors are raised to the caller."""
        client = make_client(make_response({}, status_code=500))
        with pytest.raises(requests.HTTPError):
            await client.query("SELECT * WHERE {}", ENDPOINT)

    @pytest.mark.asyncio
    async def test_malformed_response(self) -> None:
        """Test a response without results is rejected."""
        client = make_client(make_response({"boolean": True}))
        with pytest.raises(ValueError):
            await client.query("ASK {}", ENDPOINT)

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        """Test closing releases the session."""
        client = make_client(make_response({"results": {"bindings": []}}))
        session = client._session
        await client.close()
        session.close.assert_called_once()
        assert client._session is None

    def test_session_setup(self) -> None:
        """Test the session asks for SPARQL JSON results."""
        client = SparqlClient()
        session = client._get_session()
        assert session.headers["Accept"] == "application/sparql-results+json"
        assert client._get_session() is session
        session.close()
