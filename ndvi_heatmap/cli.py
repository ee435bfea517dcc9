#!/usr/bin/env python3
"""
Render an NDVI heatmap frame to PNG

Usage:
    ndvi-heatmap render --synthetic 64 --output frame.png
    ndvi-heatmap render --input field.npy --zoom 2 --at 200 600
    ndvi-heatmap render --input field.csv --zoom 4 --pan -150 0 --verbose
    ndvi-heatmap serve --port 8000
"""

import click
from loguru import logger

from .config import load_config
from .data import generate_mock_ndvi_data, load_grid
from .engine import HeatmapEngine, default_export_name
from .logging_utils import setup_logging


@click.group()
def cli():
    """NDVI heatmap engine tools"""


@cli.command()
@click.option('--input', 'input_path', type=click.Path(exists=True, dir_okay=False),
              help='Grid file (.npy or headerless .csv)')
@click.option('--synthetic', type=int, default=None, help='Generate a synthetic SIZE x SIZE field')
@click.option('--seed', type=int, default=None, help='Seed for the synthetic field')
@click.option('--zoom', type=float, default=1.0, help='Zoom factor applied before export')
@click.option('--at', 'anchor', type=(float, float), default=None,
              help='Zoom anchor in canvas units (default: canvas centre)')
@click.option('--pan', type=(float, float), default=None, help='Pan delta in canvas units')
@click.option('--output', type=click.Path(dir_okay=False), default=None, help='PNG output path')
@click.option('--config', default=None, help='Config file')
@click.option('--verbose', is_flag=True, help='Verbose logging')
def render(input_path, synthetic, seed, zoom, anchor, pan, output, config, verbose):
    """Render one heatmap frame and report the visible NDVI range"""

    settings = load_config(config)
    setup_logging(verbose=verbose, level=None if verbose else settings.log_level)

    if input_path and synthetic is not None:
        raise click.UsageError("Use either --input or --synthetic, not both")

    try:
        if input_path:
            grid = load_grid(input_path)
        else:
            grid = generate_mock_ndvi_data(synthetic or 64, seed=seed)
    except ValueError as e:
        raise click.ClickException(str(e))

    engine = HeatmapEngine(settings)
    engine.set_grid(grid)

    transform = engine.transform
    if zoom != 1.0:
        cx, cy = anchor or (transform.canvas_width / 2, transform.canvas_height / 2)
        engine.apply_viewport(transform.zoom_to_point(engine.viewport, cx, cy, zoom))
    if pan:
        engine.apply_viewport(transform.pan_by(engine.viewport, pan[0], pan[1]))

    path = engine.export_png(output or default_export_name())

    viewport = engine.viewport
    logger.info(
        f"Viewport: scale={viewport.scale:.2f} "
        f"translate=({viewport.translate_x:.1f}, {viewport.translate_y:.1f})"
    )
    logger.info(f"Visible NDVI: min={engine.stats.min:.4f} max={engine.stats.max:.4f}")
    click.echo(str(path))


@cli.command()
@click.option('--host', default='0.0.0.0')
@click.option('--port', type=int, default=8000)
@click.option('--verbose', is_flag=True, help='Verbose logging')
def serve(host, port, verbose):
    """Run the heatmap HTTP API"""
    import uvicorn

    setup_logging(verbose=verbose)
    logger.info(f"Starting NDVI heatmap API on {host}:{port}")
    uvicorn.run("ndvi_heatmap.api.main:app", host=host, port=port)


def main():
    cli()


if __name__ == "__main__":
    main()
