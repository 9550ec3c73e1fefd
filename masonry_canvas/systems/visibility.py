"""Viewport visibility system.

Marks every tile whose pixel rectangle touches the viewport. Bounds are
inclusive on both sides, so a tile sharing only an edge with the viewport
counts as visible.
"""

from dataclasses import replace

from pyrsistent import pset

from masonry_canvas.components import Rect, Viewport
from masonry_canvas.state import CanvasState


def is_visible(rect: Rect, viewport: Viewport, cell_size: int) -> bool:
    """Return True if ``rect`` (grid units) intersects the viewport."""
    return (
        rect.x * cell_size + viewport.offset_x <= viewport.width
        and 0 <= (rect.x + rect.w) * cell_size + viewport.offset_x
        and rect.y * cell_size + viewport.offset_y <= viewport.height
        and 0 <= (rect.y + rect.h) * cell_size + viewport.offset_y
    )


def visibility_system(state: CanvasState) -> CanvasState:
    """Recompute ``state.visible`` for the current viewport."""
    cell_size = state.grid.cell_size
    visible = pset(
        tile_id
        for tile_id, rect in state.rect.items()
        if is_visible(rect, state.viewport, cell_size)
    )
    return replace(state, visible=visible)
