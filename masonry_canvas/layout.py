"""Pixel-space layout helpers.

Converts between the viewport size, the unit grid and screen pixels. The grid
is ``grid_scale`` times larger than the viewport on each axis and starts out
centered on it; panning is clamped so the grid edge (plus one gutter) never
leaves the screen.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from masonry_canvas.components import GridSpec, Rect
from masonry_canvas.config import CanvasConfig
from masonry_canvas.errors import GridSpecError


@dataclass(frozen=True)
class PixelRect:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Centering:
    """Offsets that center the grid on the viewport.

    Attributes:
        center_x: Horizontal shift that puts the viewport in the grid middle.
        center_y: Vertical counterpart of ``center_x``.
        width_rest: Pixels by which the viewport's whole cells overhang its width.
        height_rest: Vertical counterpart of ``width_rest``.
    """

    center_x: float
    center_y: float
    width_rest: int
    height_rest: int


def viewport_cells(width: int, height: int, cell_size: int) -> Tuple[int, int]:
    """Number of (partial) cells needed to cover the viewport on each axis."""
    return math.ceil(width / cell_size), math.ceil(height / cell_size)


def grid_spec_for_viewport(width: int, height: int, config: CanvasConfig) -> GridSpec:
    if config.cell_size <= 0:
        raise GridSpecError(f"cell_size must be positive, got {config.cell_size}")
    columns, rows = viewport_cells(width, height, config.cell_size)
    return GridSpec(
        cell_size=config.cell_size,
        columns=columns * config.grid_scale,
        rows=rows * config.grid_scale,
        min_units=config.min_units,
    )


def centering_for_viewport(width: int, height: int, spec: GridSpec) -> Centering:
    view_columns, view_rows = viewport_cells(width, height, spec.cell_size)
    cell = spec.cell_size
    return Centering(
        center_x=spec.columns * cell / 2 - view_columns * cell / 2,
        center_y=spec.rows * cell / 2 - view_rows * cell / 2,
        width_rest=math.ceil(view_columns * cell - width),
        height_rest=math.ceil(view_rows * cell - height),
    )


def clamp_pan(dx: float, dy: float, centering: Centering, padding: int) -> Tuple[float, float]:
    """Clamp a pan delta so the grid edges stay within reach of the viewport."""
    if dx > 0:
        dx = min(dx, centering.center_x + padding)
    else:
        dx = max(dx, -(centering.center_x + centering.width_rest))
    if dy > 0:
        dy = min(dy, centering.center_y + padding)
    else:
        dy = max(dy, -(centering.center_y + centering.height_rest))
    return dx, dy


def tile_geometry(rect: Rect, cell_size: int, padding: int) -> PixelRect:
    """Pixel bounds of a tile's visual element (gutter trimmed right / bottom)."""
    return PixelRect(
        x=rect.x * cell_size,
        y=rect.y * cell_size,
        width=rect.w * cell_size - padding,
        height=rect.h * cell_size - padding,
    )
