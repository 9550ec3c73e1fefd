"""Fade system.

Every frame each tile's opacity moves one ``fade_step`` toward its target:
1.0 while the tile is visible and loaded, 0.0 otherwise. Values are clamped to
the target so repeated float steps never overshoot.
"""

from dataclasses import replace

from masonry_canvas.state import CanvasState

# Float drift allowed when snapping onto the target.
_EPSILON = 1e-9


def approach(value: float, target: float, step: float) -> float:
    """Move ``value`` toward ``target`` by at most ``step``."""
    if abs(target - value) <= step + _EPSILON:
        return target
    return value + step if target > value else value - step


def opacity_system(state: CanvasState) -> CanvasState:
    state_tile = state.tile
    for tile_id, tile in state.tile.items():
        target = 1.0 if tile.loaded and tile_id in state.visible else 0.0
        if tile.opacity == target:
            continue
        opacity = approach(tile.opacity, target, state.fade_step)
        state_tile = state_tile.set(tile_id, replace(tile, opacity=opacity))
    return replace(state, tile=state_tile)
