"""Viewport component: visible window size and current pan offset in pixels."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    """Screen window over the grid.

    Attributes:
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        offset_x: Horizontal translation applied to grid pixels.
        offset_y: Vertical translation applied to grid pixels.
    """

    width: int
    height: int
    offset_x: float = 0.0
    offset_y: float = 0.0
