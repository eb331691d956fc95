"""SPARQL endpoint client for VoID statistics and prefix declarations."""

import asyncio
import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from schemamap.config import settings
from schemamap.models import StatRow
from schemamap.namespaces import PrefixTable

logger = logging.getLogger(__name__)

SPARQL_RESULTS_JSON = "application/sparql-results+json"

STATISTICS_QUERY = """PREFIX owl: <http://www.w3.org/2002/07/owl#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX sh:<http://www.w3.org/ns/shacl#>
PREFIX sd:<http://www.w3.org/ns/sparql-service-description#>
PREFIX void:<http://rdfs.org/ns/void#>
PREFIX void-ext:<http://ldf.fi/void-ext#>
SELECT DISTINCT ?subjectClass ?prop ?objectClass ?objectDatatype ?triples
?objectClassTopParent ?objectClassTopParentLabel ?subjectClassTopParent ?subjectClassTopParentLabel
?subjectClassLabel ?objectClassLabel ?subjectClassComment ?objectClassComment
WHERE {
  {
    SELECT * WHERE {
      {
        ?s sd:graph ?graph .
        ?graph void:classPartition ?cp .
        ?cp void:class ?subjectClass ;
          void:propertyPartition ?pp .
        OPTIONAL {?subjectClass rdfs:label ?subjectClassLabel }
        OPTIONAL {?subjectClass rdfs:comment ?subjectClassComment }
        OPTIONAL {
          ?subjectClass rdfs:subClassOf* ?subjectClassTopParent .
          OPTIONAL {?subjectClassTopParent rdfs:label ?subjectClassTopParentLabel}
          FILTER(isIRI(?subjectClassTopParent) && ?subjectClassTopParent != owl:Thing && ?subjectClassTopParent != owl:Class)
          MINUS {
            ?subjectClassTopParent rdfs:subClassOf ?intermediateParent .
            FILTER(?intermediateParent != owl:Thing && ?intermediateParent != owl:Class)
          }
        }

        ?pp void:property ?prop ;
          void:triples ?triples .
        OPTIONAL {
          {
            ?pp  void:classPartition [ void:class ?objectClass ] .
            OPTIONAL {?objectClass rdfs:label ?objectClassLabel }
            OPTIONAL {?objectClass rdfs:comment ?objectClassComment }
            OPTIONAL {
              ?objectClass rdfs:subClassOf* ?objectClassTopParent .
              OPTIONAL {?objectClassTopParent rdfs:label ?objectClassTopParentLabel}
              FILTER(isIRI(?objectClassTopParent) && ?objectClassTopParent != owl:Thing && ?objectClassTopParent != owl:Class)
              MINUS {
                ?objectClassTopParent rdfs:subClassOf ?intermediateParent .
                FILTER(?intermediateParent != owl:Thing && ?intermediateParent != owl:Class)
              }
            }
          } UNION {
            ?pp void-ext:datatypePartition [ void-ext:datatype ?objectDatatype ] .
          }
        }
      } UNION {
        ?linkset void:subjectsTarget [ void:class ?subjectClass ] ;
          void:linkPredicate ?prop ;
          void:objectsTarget [ void:class ?objectClass ] .
      }
    }
  }
} ORDER BY ?subjectClass ?objectClass ?objectDatatype ?graph ?triples"""

PREFIXES_QUERY = """PREFIX sh: <http://www.w3.org/ns/shacl#>
SELECT DISTINCT ?prefix ?namespace
WHERE { [] sh:namespace ?namespace ; sh:prefix ?prefix . }
ORDER BY ?prefix"""


class SparqlClient:
    """Async-wrapped SPARQL client using requests.

    Queries run in a thread pool, bounded by a semaphore so that several
    endpoints can be fetched concurrently without flooding them.
    """

    def __init__(
        self,
        timeout: float | None = None,
        max_concurrent: int | None = None,
    ) -> None:
        self.timeout = timeout or settings.sparql_timeout
        self.max_concurrent = max_concurrent or settings.sparql_max_concurrent

        self._semaphore = asyncio.Semaphore(self.max_concurrent)
        self._session: requests.Session | None = None

    def _get_session(self) -> requests.Session:
        """Get or create requests session with connection pooling."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": SPARQL_RESULTS_JSON})
            adapter = HTTPAdapter(
                pool_connections=self.max_concurrent,
                pool_maxsize=self.max_concurrent * 2,
                max_retries=Retry(total=2, backoff_factor=0.5),
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _sync_query(self, query: str, endpoint: str) -> list[dict[str, Any]]:
        """Synchronous SELECT query (runs in thread), returns result bindings."""
        session = self._get_session()
        response = session.get(
            endpoint,
            params={"query": query},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()

        results = data.get("results")
        if not isinstance(results, dict):
            logger.error(f"Unexpected SPARQL response from {endpoint}: {str(data)[:200]}")
            raise ValueError(f"Unexpected SPARQL response from {endpoint}")
        return results.get("bindings", [])

    async def query(self, query: str, endpoint: str) -> list[dict[str, Any]]:
        """Run a SELECT query against an endpoint."""
        async with self._semaphore:
            try:
                return await asyncio.to_thread(self._sync_query, query, endpoint)
            except requests.HTTPError as e:
                logger.error(f"SPARQL error from {endpoint}: {e.response.status_code} - {e.response.text[:200]}")
                raise
            except requests.RequestException as e:
                logger.error(f"SPARQL request to {endpoint} failed: {e}")
                raise

    async def fetch_statistics(self, endpoint: str) -> list[StatRow]:
        """Fetch the VoID class/predicate statistics of an endpoint."""
        bindings = await self.query(STATISTICS_QUERY, endpoint)
        rows = [StatRow.from_bindings(b) for b in bindings]
        logger.info(f"Fetched {len(rows)} statistics rows from {endpoint}")
        return rows

    async def fetch_prefixes(self, endpoint: str) -> PrefixTable:
        """Fetch the SHACL prefix declarations of an endpoint (namespace -> prefix)."""
        bindings = await self.query(PREFIXES_QUERY, endpoint)
        prefixes: PrefixTable = {}
        for b in bindings:
            namespace = b.get("namespace", {}).get("value")
            prefix = b.get("prefix", {}).get("value")
            if namespace and prefix:
                prefixes[namespace] = prefix
        logger.info(f"Fetched {len(prefixes)} prefixes from {endpoint}")
        return prefixes
