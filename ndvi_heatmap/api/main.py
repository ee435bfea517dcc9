# ndvi_heatmap/api/main.py

from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger
from pydantic import BaseModel, Field

from ndvi_heatmap.colormap import COLOR_STOPS, rgb_to_css
from ndvi_heatmap.config import load_config
from ndvi_heatmap.data import as_grid, generate_mock_ndvi_data
from ndvi_heatmap.engine import HeatmapEngine
from ndvi_heatmap.models import HoverQueryResult, ViewportStats
from ndvi_heatmap.viewport import ViewportState, ViewportTransform


# -----------------------------------------------------------------------------
# Pydantic models
# -----------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str


class ColorStopItem(BaseModel):
    value: float
    label: str
    color: str


class ColormapResponse(BaseModel):
    stops: List[ColorStopItem]


class ViewportModel(BaseModel):
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0


class GridRequest(BaseModel):
    grid: Optional[List[List[float]]] = Field(
        default=None,
        description="NDVI rows. If omitted, a synthetic field is generated.",
    )
    synthetic_size: int = Field(default=64, ge=1, le=512)
    seed: Optional[int] = None
    viewport: ViewportModel = Field(default_factory=ViewportModel)


class HoverRequest(GridRequest):
    screen_x: float
    screen_y: float
    rendered_width: Optional[float] = None
    rendered_height: Optional[float] = None


class HoverResponse(BaseModel):
    cell: Optional[HoverQueryResult] = None


class ZoomRequest(BaseModel):
    viewport: ViewportModel = Field(default_factory=ViewportModel)
    cursor_x: float
    cursor_y: float
    factor: float


# -----------------------------------------------------------------------------
# FastAPI app & CORS
# -----------------------------------------------------------------------------

app = FastAPI(
    title="NDVI Heatmap API",
    description="Stateless rendering, viewport statistics and hit-testing for NDVI grids.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

SETTINGS = load_config()


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _engine_for(req: GridRequest) -> HeatmapEngine:
    """
    Build a fresh engine for one request.

    The requested viewport is re-clamped so arbitrary client input can never
    break the coverage invariant.
    """
    engine = HeatmapEngine(SETTINGS)

    if req.grid is None:
        grid = generate_mock_ndvi_data(req.synthetic_size, seed=req.seed)
    else:
        try:
            grid = as_grid(req.grid)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    engine.set_grid(grid)
    engine.apply_viewport(_viewport_state(req.viewport))
    return engine


def _viewport_state(vp: ViewportModel) -> ViewportState:
    return ViewportState(scale=vp.scale, translate_x=vp.translate_x, translate_y=vp.translate_y)


def _viewport_model(state: ViewportState) -> ViewportModel:
    return ViewportModel(
        scale=state.scale,
        translate_x=state.translate_x,
        translate_y=state.translate_y,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------

@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/colormap", response_model=ColormapResponse)
def colormap() -> ColormapResponse:
    """
    The NDVI colour ramp, for legends.
    """
    return ColormapResponse(stops=[
        ColorStopItem(value=stop.value, label=stop.label, color=rgb_to_css(stop.color))
        for stop in COLOR_STOPS
    ])


@app.post("/render")
def render(req: GridRequest) -> Response:
    engine = _engine_for(req)
    logger.info(
        f"Render {engine.grid.shape[0]}x{engine.grid.shape[1]} "
        f"at scale {engine.viewport.scale:.2f}"
    )
    return Response(content=engine.canvas.to_png(), media_type="image/png")


@app.post("/stats", response_model=ViewportStats)
def stats(req: GridRequest) -> ViewportStats:
    return _engine_for(req).stats


@app.post("/hover", response_model=HoverResponse)
def hover(req: HoverRequest) -> HoverResponse:
    engine = _engine_for(req)
    if req.rendered_width and req.rendered_height:
        engine.controller.resize(req.rendered_width, req.rendered_height)
    return HoverResponse(cell=engine.controller.on_pointer_move(req.screen_x, req.screen_y))


@app.post("/zoom", response_model=ViewportModel)
def zoom(req: ZoomRequest) -> ViewportModel:
    transform = ViewportTransform.from_config(SETTINGS)
    state = transform.normalize(_viewport_state(req.viewport))
    return _viewport_model(transform.zoom_to_point(state, req.cursor_x, req.cursor_y, req.factor))
