"""
In-memory RGB drawing surface

A fixed-resolution pixel buffer standing in for a 2-D canvas context. There
is no implicit transform or compositing state: callers pass the viewport
explicitly to the operations that need it.

Rasterisation rule: a device pixel is covered by a rectangle when the
pixel's centre lies inside the half-open rectangle [x0, x1) x [y0, y1). No
anti-aliasing or smoothing is ever applied, so cell edges stay crisp at any
zoom level.
"""

import io
import math
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

from .viewport import ViewportState

RGB = Tuple[int, int, int]


def _pixel_span(lo: float, hi: float, limit: int) -> Tuple[int, int]:
    """Pixels j with lo <= j + 0.5 < hi, clipped to [0, limit)."""
    start = max(0, math.ceil(lo - 0.5))
    end = min(limit, math.ceil(hi - 0.5))
    return start, max(start, end)


def _covering_index(positions: np.ndarray, cell_size: float, count: int,
                    overlap: float) -> np.ndarray:
    """
    Index of the last-painted cell covering each position, -1 if none.

    Cell ``i`` spans [i * size, (i + 1) * size + overlap). Painting in
    increasing order means the highest covering index wins, which is the
    cell containing the position, or the last cell for positions inside the
    trailing overlap.
    """
    idx = np.floor(positions / cell_size).astype(np.int64)
    idx = np.where(idx >= count, count - 1, idx)
    covered = (positions >= 0) & (positions < count * cell_size + overlap)
    return np.where(covered, idx, -1)


class Canvas:
    """Fixed-size RGB pixel buffer."""

    def __init__(self, width: int = 800, height: int = 800):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    def fill(self, color: RGB):
        self.pixels[:, :] = color

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGB,
                  state: Optional[ViewportState] = None):
        """Fill a rectangle given in content units, under ``state`` if set."""
        if state is not None:
            s = state.scale
            x0, x1 = state.translate_x + x * s, state.translate_x + (x + w) * s
            y0, y1 = state.translate_y + y * s, state.translate_y + (y + h) * s
        else:
            x0, x1, y0, y1 = x, x + w, y, y + h

        cols = _pixel_span(x0, x1, self.width)
        rows = _pixel_span(y0, y1, self.height)
        self.pixels[rows[0]:rows[1], cols[0]:cols[1]] = color

    def paint_cells(self, colors: np.ndarray, cell_width: float,
                    cell_height: float, overlap: float, state: ViewportState):
        """
        Paint a grid of cell colours under the viewport transform.

        Equivalent to calling ``fill_rect`` for every cell in row-major order
        with size (cell_width + overlap, cell_height + overlap), but samples
        each device pixel once.

        Args:
            colors: uint8 array (rows, cols, 3)
            cell_width, cell_height: Cell size in content units
            overlap: Extra extent added to every cell
            state: Viewport to draw under
        """
        rows, cols = colors.shape[:2]

        # Pixel centres mapped back into content space
        xs = (np.arange(self.width) + 0.5 - state.translate_x) / state.scale
        ys = (np.arange(self.height) + 0.5 - state.translate_y) / state.scale

        col_idx = _covering_index(xs, cell_width, cols, overlap)
        row_idx = _covering_index(ys, cell_height, rows, overlap)

        mask = (row_idx >= 0)[:, np.newaxis] & (col_idx >= 0)[np.newaxis, :]
        sampled = colors[np.clip(row_idx, 0, None)][:, np.clip(col_idx, 0, None)]
        self.pixels[mask] = sampled[mask]

    def composite_overlay(self, color: RGB, opacity: float):
        """
        Blend a flat colour over the whole surface with the overlay mode.

        Overlay multiplies dark backdrop channels and screens light ones,
        then the result is mixed back in at ``opacity``.
        """
        backdrop = self.pixels.astype(np.float64) / 255.0
        source = np.asarray(color, dtype=np.float64) / 255.0

        blended = np.where(
            backdrop <= 0.5,
            2.0 * backdrop * source,
            1.0 - 2.0 * (1.0 - backdrop) * (1.0 - source),
        )
        out = backdrop * (1.0 - opacity) + blended * opacity
        self.pixels[:, :] = np.clip(np.floor(out * 255.0 + 0.5), 0, 255).astype(np.uint8)

    def pixel_at(self, x: int, y: int) -> RGB:
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.to_image().save(buffer, format="PNG")
        return buffer.getvalue()

    def save_png(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_image().save(path, format="PNG")
        return path
