"""Namespace helpers: metadata classification and CURIE compression."""

# namespace URI -> prefix, as discovered from an endpoint
PrefixTable = dict[str, str]

METADATA_NAMESPACES: tuple[str, ...] = (
    "http://www.w3.org/ns/shacl#",
    "http://www.w3.org/2002/07/owl#",
    "http://www.w3.org/2000/01/rdf-schema#",
    "http://www.w3.org/ns/sparql-service-description#",
    "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "http://rdfs.org/ns/void#",
    "http://purl.org/query/voidext#",
    "http://purl.org/query/bioquery#",
)

# Reified statements are instance data, not schema description
RDF_STATEMENT = "http://www.w3.org/1999/02/22-rdf-syntax-ns#Statement"


def is_metadata_uri(uri: str | None) -> bool:
    """Check if a URI belongs to the ontology/vocabulary/self-description namespaces."""
    if not uri:
        return False
    if uri == RDF_STATEMENT:
        return False
    return any(uri.startswith(namespace) for namespace in METADATA_NAMESPACES)


def compress_uri(prefixes: PrefixTable, uri: str) -> str:
    """Compress a URI to ``prefix:local`` using the longest matching namespace.

    URIs without a known namespace are returned unchanged.
    """
    best_namespace = ""
    for namespace in prefixes:
        if uri.startswith(namespace) and len(namespace) > len(best_namespace):
            best_namespace = namespace
    if not best_namespace:
        return uri
    return f"{prefixes[best_namespace]}:{uri[len(best_namespace):]}"


def merge_prefixes(target: PrefixTable, incoming: PrefixTable) -> None:
    """Merge a prefix table into ``target`` one key at a time.

    Namespaces already present keep their prefix (first endpoint wins).
    """
    for namespace, prefix in incoming.items():
        target.setdefault(namespace, prefix)
