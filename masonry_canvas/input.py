"""Pointer-drag pan input.

``PanInput`` turns press / drag / release events into a clamped pan target and
eases the displayed pan toward it a fraction at a time, one step per
:meth:`PanInput.viewport_offset` call (i.e. per frame). The returned offset is
the translation applied to grid pixels, which is what the visibility test
consumes.
"""

from typing import Optional, Tuple

from masonry_canvas.layout import Centering, clamp_pan
from masonry_canvas.types import Offset


class PanInput:
    def __init__(self, centering: Centering, padding: int, smoothing: float = 0.2) -> None:
        if not 0 < smoothing <= 1:
            raise ValueError(f"smoothing must be in (0, 1], got {smoothing}")
        self.centering = centering
        self.padding = padding
        self.smoothing = smoothing
        self.target: Tuple[float, float] = (0.0, 0.0)
        self.current: Tuple[float, float] = (0.0, 0.0)
        self._pointer_start: Optional[Tuple[float, float]] = None
        self._pan_start: Tuple[float, float] = (0.0, 0.0)

    @property
    def pressed(self) -> bool:
        return self._pointer_start is not None

    def press(self, x: float, y: float) -> None:
        self._pointer_start = (x, y)
        self._pan_start = self.current

    def drag(self, x: float, y: float) -> None:
        if self._pointer_start is None:
            return
        sx, sy = self._pointer_start
        px, py = self._pan_start
        self.target = clamp_pan(px + (x - sx), py + (y - sy), self.centering, self.padding)

    def release(self) -> None:
        self._pointer_start = None

    def pan_by(self, dx: float, dy: float) -> None:
        """Shift the target directly (keyboard / button panning)."""
        tx, ty = self.target
        self.target = clamp_pan(tx + dx, ty + dy, self.centering, self.padding)

    def viewport_offset(self) -> Offset:
        cx, cy = self.current
        tx, ty = self.target
        self.current = (
            cx + (tx - cx) * self.smoothing,
            cy + (ty - cy) * self.smoothing,
        )
        return (
            self.current[0] - self.centering.center_x,
            self.current[1] - self.centering.center_y,
        )
