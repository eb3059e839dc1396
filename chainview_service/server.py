"""
Chain Visualizer API Server
===========================

Serves built chain graphs and overlay placements as JSON for a drawing
surface. Stateless: every request builds from scratch, nothing is stored.

Endpoints:
- GET  /health
- POST /api/v1/graph                          -> preview JSON in, graph out
- POST /api/v1/overlay/position               -> popover placement
- GET  /api/v1/subscriptions/{id}/graph       -> fetch preview, build graph

Usage:
    uvicorn chainview_service.server:app --reload
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from chainview.config import ChainViewConfig, ServiceConfig
from chainview.dtos import ChainPreviewDTO
from chainview.errors import PreviewFetchError
from chainview.mapper import PreviewMapper
from chainview.presentation.viewmodels import EMPTY_RULES_MESSAGE, detail_panel_size
from chainview.visualization.graph import GraphBuilder
from chainview.visualization.overlay import OverlayPositioner, Rect, Size

from .client import PreviewClient
from .serialization import degradation_to_dict, point_to_dict, view_to_dict

logger = logging.getLogger(__name__)


# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

config = ChainViewConfig(service=ServiceConfig.from_env())


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Chain visualizer API using admin API at %s", config.service.base_url)
    yield
    logger.info("Chain visualizer API shutting down")


app = FastAPI(
    title="Chain Rule Visualizer API",
    version="0.1.0",
    description="Graph layout and overlay placement for subscription chain-proxy rules",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


def get_preview_client() -> PreviewClient:
    return PreviewClient(config.service)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class AnchorModel(BaseModel):
    left: float
    top: float
    width: float = Field(0.0, ge=0)
    height: float = Field(0.0, ge=0)


class SizeModel(BaseModel):
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)


class OverlayPositionRequest(BaseModel):
    anchor: AnchorModel
    viewport: SizeModel
    overlay: Optional[SizeModel] = None
    member_count: int = Field(0, ge=0, alias="memberCount")
    margin: Optional[float] = Field(None, ge=0)

    model_config = {"populate_by_name": True}


# =============================================================================
# ENDPOINTS
# =============================================================================

def _graph_response(preview: ChainPreviewDTO) -> Dict[str, Any]:
    view = GraphBuilder(config.layout).build(preview.rules)
    return {
        "subscriptionName": preview.subscription_name,
        "graph": view_to_dict(view),
        "emptyMessage": EMPTY_RULES_MESSAGE if view.is_empty else None,
        "degradations": [degradation_to_dict(d) for d in preview.degradations],
    }


@app.get("/health")
async def health_check():
    return {"status": "online"}


@app.post("/api/v1/graph")
async def build_graph(payload: Any = Body(...)):
    """
    Build a graph from a chain-preview payload.
    Accepts the preview object itself or a bare rule array.
    """
    if isinstance(payload, list):
        payload = {"rules": payload}
    preview = PreviewMapper().map_preview(payload)
    return _graph_response(preview)


@app.post("/api/v1/overlay/position")
async def position_overlay(request: OverlayPositionRequest):
    """
    Place a detail popover. When no overlay size is given it is derived
    from the member count, the way the detail panel sizes itself.
    """
    if request.overlay is not None:
        overlay = Size(width=request.overlay.width, height=request.overlay.height)
    else:
        overlay = detail_panel_size(request.member_count, config.overlay)
    viewport = Size(width=request.viewport.width, height=request.viewport.height)
    anchor = Rect(
        left=request.anchor.left, top=request.anchor.top,
        width=request.anchor.width, height=request.anchor.height,
    )

    positioner = OverlayPositioner(config.overlay)
    point = positioner.position(anchor, overlay, viewport, request.margin)
    return {
        **point_to_dict(point),
        "width": overlay.width,
        "height": overlay.height,
        "fits": positioner.fits(overlay, viewport, request.margin),
    }


@app.get("/api/v1/subscriptions/{subscription_id}/graph")
def subscription_graph(subscription_id: int, client: PreviewClient = Depends(get_preview_client)):
    """Fetch one subscription's chain preview from the admin API and build its graph."""
    try:
        preview = client.fetch_preview(subscription_id)
    except PreviewFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _graph_response(preview)
