"""Interaction state and the display decisions derived from it."""

from schemamap.interaction.state import InteractionState
from schemamap.interaction.visibility import (
    EdgeDisplay,
    EdgeEmphasis,
    NodeDisplay,
    edge_display,
    node_display,
)

__all__ = [
    "InteractionState",
    "NodeDisplay",
    "EdgeDisplay",
    "EdgeEmphasis",
    "node_display",
    "edge_display",
]
