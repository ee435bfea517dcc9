"""
Unit tests for the pixel surface and grid renderer
"""

import io

import numpy as np
import pytest
from PIL import Image

from ndvi_heatmap.canvas import Canvas
from ndvi_heatmap.colormap import map_grid_to_colors, map_value_to_color
from ndvi_heatmap.config import HeatmapConfig, TintConfig
from ndvi_heatmap.data import as_grid
from ndvi_heatmap.renderer import GridRenderer, ambient_tint
from ndvi_heatmap.viewport import IDENTITY, ViewportState


@pytest.fixture
def untinted_config():
    """Config with the ambient tint disabled so cell colours are exact"""
    return HeatmapConfig(tint=TintConfig(opacity=0.0))


def _tinted(color, tint, opacity):
    canvas = Canvas(1, 1)
    canvas.fill(color)
    canvas.composite_overlay(tint, opacity)
    return canvas.pixel_at(0, 0)


@pytest.mark.unit
class TestCanvas:

    def test_fill_rect_pixel_centre_coverage(self):
        canvas = Canvas(10, 10)
        canvas.fill_rect(2.4, 2.6, 3.0, 3.0, (255, 0, 0))

        # x covers centres 2.5..4.5, y covers centres 3.5..5.5
        assert canvas.pixel_at(2, 3) == (255, 0, 0)
        assert canvas.pixel_at(4, 5) == (255, 0, 0)
        assert canvas.pixel_at(2, 2) == (0, 0, 0)
        assert canvas.pixel_at(5, 3) == (0, 0, 0)

    def test_fill_rect_under_transform(self):
        canvas = Canvas(10, 10)
        canvas.fill_rect(1, 1, 2, 2, (0, 255, 0), state=ViewportState(2.0, -1.0, -1.0))
        # Device rect is [1, 5) x [1, 5)
        assert canvas.pixel_at(1, 1) == (0, 255, 0)
        assert canvas.pixel_at(4, 4) == (0, 255, 0)
        assert canvas.pixel_at(5, 5) == (0, 0, 0)

    def test_fill_rect_off_surface_is_ignored(self):
        canvas = Canvas(4, 4)
        canvas.fill_rect(-50, -50, 10, 10, (9, 9, 9))
        assert not canvas.pixels.any()

    def test_paint_cells_matches_row_major_fill_rect(self):
        """Vectorised painting equals the per-cell painter's algorithm"""
        rng = np.random.default_rng(21)
        grid = rng.uniform(0, 1, size=(3, 5))
        colors = map_grid_to_colors(grid)
        cell_w, cell_h, overlap = 800 / 5, 800 / 3, 0.4

        for state in (IDENTITY, ViewportState(2.0, -300.0, -100.0)):
            fast = Canvas(800, 800)
            fast.paint_cells(colors, cell_w, cell_h, overlap, state)

            slow = Canvas(800, 800)
            for row in range(3):
                for col in range(5):
                    slow.fill_rect(col * cell_w, row * cell_h, cell_w + overlap,
                                   cell_h + overlap, tuple(colors[row, col]), state)

            np.testing.assert_array_equal(fast.pixels, slow.pixels)

    def test_overlay_zero_opacity_is_identity(self):
        canvas = Canvas(3, 3)
        canvas.fill((34, 197, 94))
        canvas.composite_overlay((255, 240, 200), 0.0)
        assert canvas.pixel_at(1, 1) == (34, 197, 94)

    def test_overlay_brightens_light_and_darkens_dark(self):
        """Overlay screens light backdrops and multiplies dark ones"""
        light = _tinted((200, 200, 200), (255, 255, 255), 1.0)
        dark = _tinted((40, 40, 40), (0, 0, 0), 1.0)
        assert light[0] > 200
        assert dark[0] < 40

    def test_png_export(self, tmp_path):
        canvas = Canvas(16, 8)
        canvas.fill((20, 83, 45))

        data = canvas.to_png()
        assert data.startswith(b"\x89PNG")

        path = canvas.save_png(tmp_path / "frames" / "frame.png")
        with Image.open(path) as img:
            assert img.size == (16, 8)
            assert img.getpixel((3, 3)) == (20, 83, 45)
        with Image.open(io.BytesIO(data)) as img:
            assert img.mode == "RGB"


@pytest.mark.unit
class TestGridRenderer:

    def test_empty_grid_is_noop(self, config):
        canvas = Canvas(800, 800)
        assert GridRenderer(config).render(as_grid([]), IDENTITY, canvas) is False
        assert not canvas.pixels.any()

    def test_cells_fill_the_canvas(self, untinted_config, grid_2x2):
        canvas = Canvas(800, 800)
        assert GridRenderer(untinted_config).render(as_grid(grid_2x2), IDENTITY, canvas)

        assert canvas.pixel_at(100, 100) == map_value_to_color(0.0)
        assert canvas.pixel_at(700, 100) == map_value_to_color(0.5)
        assert canvas.pixel_at(100, 700) == map_value_to_color(0.75)
        assert canvas.pixel_at(799, 799) == map_value_to_color(1.0)

    def test_crisp_cell_boundary(self, untinted_config, grid_2x2):
        canvas = Canvas(800, 800)
        GridRenderer(untinted_config).render(as_grid(grid_2x2), IDENTITY, canvas)

        assert canvas.pixel_at(399, 10) == map_value_to_color(0.0)
        assert canvas.pixel_at(400, 10) == map_value_to_color(0.5)

    def test_zoom_magnifies_top_left_cell(self, untinted_config, grid_2x2):
        canvas = Canvas(800, 800)
        GridRenderer(untinted_config).render(as_grid(grid_2x2), ViewportState(2.0, 0.0, 0.0), canvas)
        # Whole canvas now shows cell (0, 0)
        assert canvas.pixel_at(700, 700) == map_value_to_color(0.0)

    def test_ambient_tint_applied_over_cells(self, config, grid_2x2):
        grid = as_grid(grid_2x2)
        canvas = Canvas(800, 800)
        GridRenderer(config).render(grid, ViewportState(3.0, -500.0, -500.0), canvas)

        tint = ambient_tint(float(grid.mean()), config.tint)
        # Canvas point (700, 700) -> content (400, 400) -> cell (1, 1)
        expected = _tinted(map_value_to_color(1.0), tint, config.tint.opacity)
        assert canvas.pixel_at(700, 700) == expected

    def test_background_cleared_between_renders(self, untinted_config, grid_2x2):
        canvas = Canvas(800, 800)
        canvas.fill((255, 255, 255))
        GridRenderer(untinted_config).render(as_grid(grid_2x2), IDENTITY, canvas)
        assert (canvas.pixels != 255).any(axis=2).all()


@pytest.mark.unit
class TestAmbientTint:

    def test_endpoints(self, config):
        assert ambient_tint(0.1, config.tint) == (180, 200, 220)
        assert ambient_tint(0.95, config.tint) == (255, 240, 200)

    def test_halfway_channels_round_half_up(self):
        tint = TintConfig(low_color=(0, 0, 0), high_color=(1, 1, 1),
                          mean_floor=0.0, mean_span=1.0)
        assert ambient_tint(0.5, tint) == (1, 1, 1)

    def test_denser_canopy_gets_warmer_tint(self, config):
        sparse = ambient_tint(0.3, config.tint)
        dense = ambient_tint(0.7, config.tint)
        assert dense[0] > sparse[0]
        assert dense[2] < sparse[2]

    def test_all_nan_grid_renders_with_floor_tint(self, config):
        canvas = Canvas(800, 800)
        grid = as_grid([[np.nan, np.nan]])
        assert GridRenderer(config).render(grid, IDENTITY, canvas) is True
