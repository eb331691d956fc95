"""API routes for the schema overview.

Provides:
- /overview/data: graph, clusters, predicates and per-element display decisions
- Interaction endpoints: hover, select, search, filters, metadata toggle
- /health
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from schemamap import __version__
from schemamap.models import EdgeKey
from schemamap.overview import SchemaOverview

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request / Response Models
# ============================================================================


class EdgeRef(BaseModel):
    """Reference to an edge by its (source, target, predicate CURIE) triple."""

    source: str
    target: str
    predicate: str

    def to_key(self) -> EdgeKey:
        return EdgeKey(self.source, self.target, self.predicate)


class HoverRequest(BaseModel):
    """Pointer entered (uri/edge set) or left (both null) an element."""

    uri: str | None = None
    edge: EdgeRef | None = None


class SelectRequest(BaseModel):
    """Click on a node; accumulate is ctrl-click."""

    uri: str
    accumulate: bool = False


class SearchRequest(BaseModel):
    """Search box content."""

    query: str = Field(default="", max_length=500)


class FilterRequest(BaseModel):
    """Show/hide one predicate or cluster, or all of them when key is null."""

    key: str | None = None
    visible: bool


class MetadataRequest(BaseModel):
    """Show or hide ontology/SHACL/VoID metadata classes."""

    show: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    endpoints: list[str]
    usable: bool
    version: str = __version__


# ============================================================================
# Helper Functions
# ============================================================================


def get_overview(request: Request) -> SchemaOverview:
    """Get the overview from app state."""
    overview = getattr(request.app.state, "overview", None)
    if overview is None:
        raise HTTPException(status_code=503, detail="Overview not initialized")
    return overview


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Health check with the state of the last build."""
    overview = get_overview(request)
    report = overview.last_report
    return HealthResponse(
        status="ok" if report and report.usable else "degraded",
        endpoints=overview.endpoint_urls,
        usable=bool(report and report.usable),
    )


@router.get("/overview/data")
async def get_overview_data(request: Request) -> dict:
    """Nodes, edges, clusters and predicates with their current display state."""
    return get_overview(request).snapshot()


@router.get("/overview/node")
async def get_node(request: Request, uri: str) -> dict:
    """Info panel content for one class."""
    overview = get_overview(request)
    try:
        return overview.node_details(uri)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown class: {uri}")


@router.post("/overview/hover")
async def hover(request: Request, body: HoverRequest) -> dict:
    overview = get_overview(request)
    try:
        overview.hover_node(body.uri)
        overview.hover_edge(body.edge.to_key() if body.edge else None)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unknown element: {e}")
    return overview.snapshot()


@router.post("/overview/select")
async def select_node(request: Request, body: SelectRequest) -> dict:
    overview = get_overview(request)
    try:
        overview.click_node(body.uri, accumulate=body.accumulate)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown class: {body.uri}")
    return overview.snapshot()


@router.post("/overview/select-edge")
async def select_edge(request: Request, body: EdgeRef) -> dict:
    overview = get_overview(request)
    try:
        overview.click_edge(body.to_key())
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown edge")
    return overview.snapshot()


@router.post("/overview/clear")
async def clear_selection(request: Request) -> dict:
    """Same as clicking on empty space."""
    overview = get_overview(request)
    overview.click_stage()
    return overview.snapshot()


@router.post("/overview/search")
async def search(request: Request, body: SearchRequest) -> dict:
    overview = get_overview(request)
    overview.search(body.query)
    return overview.snapshot()


@router.post("/overview/filters/predicates")
async def filter_predicates(request: Request, body: FilterRequest) -> dict:
    overview = get_overview(request)
    if body.key is None:
        overview.set_all_predicates(body.visible)
    else:
        overview.toggle_predicate(body.key, body.visible)
    return overview.snapshot()


@router.post("/overview/filters/clusters")
async def filter_clusters(request: Request, body: FilterRequest) -> dict:
    overview = get_overview(request)
    if body.key is None:
        overview.set_all_clusters(body.visible)
    else:
        overview.toggle_cluster(body.key, body.visible)
    return overview.snapshot()


@router.post("/overview/metadata")
async def toggle_metadata(request: Request, body: MetadataRequest) -> dict:
    """Rebuild the graph with or without metadata classes."""
    overview = get_overview(request)
    report = overview.set_show_metadata(body.show)
    if not report.usable:
        logger.warning("Rebuilt overview has no usable data")
    return overview.snapshot()
