"""Schemamap - interactive overview of a SPARQL endpoint's classes and predicates."""

__version__ = "0.1.0"
