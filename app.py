"""
ConnectGraph FastAPI Application

A REST API server for the knowledge connection graph.
Provides endpoints for managing connections, projecting the graph,
detecting patterns, suggesting connections and computing a layout.
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from connectgraph.config import Config
from connectgraph.core.layout import LayoutController
from connectgraph.core.record_source import RecordSourceFactory
from connectgraph.models import (
    Connection,
    ConnectionStats,
    ConnectionUpdate,
    Content,
    EntityKind,
    GraphData,
    GraphNode,
    Memo,
    Pattern,
    SuggestedConnection,
    Tag,
)
from connectgraph.services import KnowledgeGraphService
from connectgraph.utils.exceptions import ValidationError
from connectgraph.utils.logger import get_logger, setup_logging

# Global service instance
service: KnowledgeGraphService | None = None
logger = get_logger(__name__)


# Pydantic models for API
class AddConnectionRequest(BaseModel):
    """Request model for adding a connection."""

    source_id: str = Field(..., description="Source entity ID")
    target_id: str = Field(..., description="Target entity ID")
    source_type: EntityKind
    target_type: EntityKind
    relationship: str = Field(default="related", description="Relationship label")
    strength: int | None = Field(default=None, description="Initial strength (default 5)")


class LayoutRequest(BaseModel):
    """Request model for a headless layout run."""

    width: float = Field(default=800.0, gt=0)
    height: float = Field(default=400.0, gt=0)


class LayoutResponse(BaseModel):
    """Final node positions."""

    positions: dict[str, tuple[float, float]]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service_initialized: bool
    record_source: str


def get_service() -> KnowledgeGraphService:
    if not service:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global service

    config = Config.from_env()

    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting ConnectGraph server")
    logger.info(f"Configuration: store={config.store.backend}")

    source = RecordSourceFactory.create(config)
    service = KnowledgeGraphService(source, config)
    await service.initialize()

    yield

    logger.info("Shutting down ConnectGraph server")
    await service.close()
    service = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="ConnectGraph API",
    description="Knowledge connection graph: connections, patterns, suggestions and layout",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if service else "initializing",
        service_initialized=service is not None,
        record_source=service.config.store.backend if service else "unknown",
    )


# Record endpoints (seeding the persistence collaborator)
@app.put("/contents/{content_id}", response_model=Content)
async def put_content(content_id: str, content: Content):
    """Insert or replace a content item."""
    content = content.model_copy(update={"id": content_id})
    await get_service().source.put_content(content)
    return content


@app.put("/memos/{memo_id}", response_model=Memo)
async def put_memo(memo_id: str, memo: Memo):
    """Insert or replace a memo."""
    memo = memo.model_copy(update={"id": memo_id})
    await get_service().source.put_memo(memo)
    return memo


@app.put("/tags/{tag_id}", response_model=Tag)
async def put_tag(tag_id: str, tag: Tag):
    """Insert or replace a tag."""
    tag = tag.model_copy(update={"id": tag_id})
    await get_service().source.put_tag(tag)
    return tag


# Connection endpoints
@app.post("/connections", response_model=Connection)
async def add_connection(request: AddConnectionRequest):
    """
    Add a connection between two entities.

    Adding the same ordered (source, target) pair again strengthens the
    existing connection by one (up to 10) instead of creating a duplicate.
    """
    try:
        return await get_service().connections.add_connection(
            source_id=request.source_id,
            target_id=request.target_id,
            source_type=request.source_type,
            target_type=request.target_type,
            relationship=request.relationship,
            strength=request.strength,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e


@app.patch("/connections/{connection_id}", response_model=Connection | None)
async def update_connection(connection_id: str, request: ConnectionUpdate):
    """Patch a connection. Unknown IDs are ignored and return null."""
    return await get_service().connections.update_connection(connection_id, request)


@app.delete("/connections/{connection_id}")
async def delete_connection(connection_id: str):
    """Delete a connection. Deleting an unknown ID succeeds."""
    await get_service().connections.delete_connection(connection_id)
    return {"deleted": connection_id}


@app.get("/nodes/{node_id}/connections", response_model=list[Connection])
async def connections_for(node_id: str):
    """All connections where the node is source or target."""
    return await get_service().connections.connections_for(node_id)


@app.get("/nodes/{node_id}/related", response_model=list[GraphNode])
async def related_nodes(node_id: str):
    """Graph nodes directly connected to the node."""
    return await get_service().related_nodes(node_id)


# Graph and analysis endpoints
@app.get("/graph", response_model=GraphData)
async def get_graph():
    """Renderable projection of the current records."""
    return await get_service().graph()


@app.get("/patterns", response_model=list[Pattern])
async def get_patterns():
    """Detect tag-cluster and repeat-connection patterns."""
    return await get_service().analyze_patterns()


@app.get("/contents/{content_id}/suggestions", response_model=list[SuggestedConnection])
async def get_suggestions(content_id: str):
    """Suggest up to five likely-missing connections for a content item."""
    return await get_service().suggest_connections(content_id)


@app.get("/stats", response_model=ConnectionStats)
async def get_stats():
    """Connection statistics."""
    return await get_service().stats()


@app.post("/layout", response_model=LayoutResponse)
async def compute_layout(request: LayoutRequest):
    """Run the force layout to rest and return final node positions."""
    svc = get_service()
    layout_config = svc.config.layout.model_copy(
        update={"width": request.width, "height": request.height}
    )
    controller = LayoutController(layout_config)
    graph = await svc.graph()
    # Headless layout is CPU-bound; keep it off the event loop.
    positions = await asyncio.to_thread(controller.layout_headless, graph)
    return LayoutResponse(positions=positions)
