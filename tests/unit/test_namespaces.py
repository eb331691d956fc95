"""Unit tests for metadata classification and CURIE compression."""

import pytest

from schemamap.namespaces import (
    METADATA_NAMESPACES,
    compress_uri,
    is_metadata_uri,
    merge_prefixes,
)


class TestIsMetadataUri:
    """Tests for is_metadata_uri."""

    def test_rdf_statement_is_not_metadata(self) -> None:
        """Test that reified statements are carved out of the RDF namespace."""
        assert not is_metadata_uri("http://www.w3.org/1999/02/22-rdf-syntax-ns#Statement")

    def test_rdf_type_is_metadata(self) -> None:
        """Test that other RDF terms are metadata."""
        assert is_metadata_uri("http://www.w3.org/1999/02/22-rdf-syntax-ns#type")

    @pytest.mark.parametrize("namespace", METADATA_NAMESPACES)
    def test_every_namespace_matches(self, namespace: str) -> None:
        """Test each metadata namespace is recognized."""
        assert is_metadata_uri(f"{namespace}Something")

    def test_empty_and_none(self) -> None:
        """Test empty input is never metadata."""
        assert not is_metadata_uri("")
        assert not is_metadata_uri(None)

    def test_domain_class(self) -> None:
        """Test a regular class URI."""
        assert not is_metadata_uri("http://purl.uniprot.org/core/Protein")


class TestCompressUri:
    """Tests for compress_uri."""

    def test_known_namespace(self) -> None:
        """Test compression with a matching namespace."""
        prefixes = {"http://purl.uniprot.org/core/": "up"}
        assert compress_uri(prefixes, "http://purl.uniprot.org/core/Protein") == "up:Protein"

    def test_unknown_namespace_unchanged(self) -> None:
        """Test URIs without a namespace are returned as is."""
        assert compress_uri({"http://a.org/": "a"}, "http://b.org/X") == "http://b.org/X"

    def test_longest_namespace_wins(self) -> None:
        """Test that the most specific namespace is used."""
        prefixes = {
            "http://purl.uniprot.org/": "uniprot",
            "http://purl.uniprot.org/core/": "up",
        }
        assert compress_uri(prefixes, "http://purl.uniprot.org/core/Gene") == "up:Gene"
        assert compress_uri(prefixes, "http://purl.uniprot.org/taxonomy/9606") == "uniprot:taxonomy/9606"

    def test_empty_table(self) -> None:
        """Test compression without any prefix."""
        assert compress_uri({}, "http://example.org/A") == "http://example.org/A"


class TestMergePrefixes:
    """Tests for merge_prefixes."""

    def test_first_prefix_kept(self) -> None:
        """Test that an already known namespace keeps its prefix."""
        target = {"http://a.org/": "a"}
        merge_prefixes(target, {"http://a.org/": "other", "http://b.org/": "b"})
        assert target == {"http://a.org/": "a", "http://b.org/": "b"}
