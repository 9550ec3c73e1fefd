"""Grid geometry components.

``GridSpec`` fixes the unit grid for the lifetime of one partition; ``Rect`` is
both a pending region during generation and a finished tile rectangle.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GridSpec:
    """Unit grid description.

    Attributes:
        cell_size: Pixel size of one grid unit.
        columns: Grid width in units.
        rows: Grid height in units.
        min_units: Minimum rectangle side, in units.
    """

    cell_size: int
    columns: int
    rows: int
    min_units: int


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in grid units.

    Attributes:
        x: Left column (0 at left).
        y: Top row (0 at top).
        w: Width in columns.
        h: Height in rows.
    """

    x: int
    y: int
    w: int
    h: int

    @property
    def area(self) -> int:
        return self.w * self.h

    def overlaps(self, other: "Rect") -> bool:
        """Return True if the two rectangles share any cell."""
        return (
            self.x < other.x + other.w
            and other.x < self.x + self.w
            and self.y < other.y + other.h
            and other.y < self.y + self.h
        )
