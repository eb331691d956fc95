"""Access to SPARQL endpoints."""

from schemamap.sparql.client import PREFIXES_QUERY, STATISTICS_QUERY, SparqlClient

__all__ = ["SparqlClient", "STATISTICS_QUERY", "PREFIXES_QUERY"]
