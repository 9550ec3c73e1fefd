from typing import Dict, Mapping, Optional, Tuple

from PIL import Image, ImageDraw

from masonry_canvas.layout import tile_geometry
from masonry_canvas.state import CanvasState
from masonry_canvas.types import Identity, Resource, TileID
from masonry_canvas.utils.image import apply_opacity, fit_cover

RGBA = Tuple[int, int, int, int]

DEFAULT_BACKGROUND: RGBA = (32, 32, 32, 255)
DEFAULT_TILE_FILL: RGBA = (0, 0, 0, 255)
DEFAULT_PADDING = 20

TextureKey = Tuple[TileID, Optional[Identity], Tuple[int, int]]


def clip_to_viewport(
    x: int, y: int, w: int, h: int, width: int, height: int
) -> Optional[Tuple[Tuple[int, int], Tuple[int, int, int, int]]]:
    """
    Intersect a ``w x h`` box placed at ``(x, y)`` with the viewport.
    Returns ``(dest, source_box)`` in viewport / box coordinates, or None if disjoint.
    """
    left, top = max(x, 0), max(y, 0)
    right, bottom = min(x + w, width), min(y + h, height)
    if left >= right or top >= bottom:
        return None
    return (left, top), (left - x, top - y, right - x, bottom - y)


class CanvasRenderer:
    """Compositor standing in for the render surface.

    ``resize`` matches the output to a new viewport; fitted textures are cached
    per tile and identity until then.
    """

    width: int
    height: int
    padding: int
    background: RGBA
    tile_fill: RGBA

    def __init__(
        self,
        width: int,
        height: int,
        padding: int = DEFAULT_PADDING,
        background: RGBA = DEFAULT_BACKGROUND,
        tile_fill: RGBA = DEFAULT_TILE_FILL,
    ):
        self.width = width
        self.height = height
        self.padding = padding
        self.background = background
        self.tile_fill = tile_fill
        self._textures: Dict[TextureKey, Image.Image] = {}

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._textures.clear()

    def texture(
        self, tile_id: TileID, identity: Optional[Identity], resource: Resource, size: Tuple[int, int]
    ) -> Image.Image:
        key = (tile_id, identity, size)
        if key not in self._textures:
            self._textures[key] = fit_cover(resource, size)
        return self._textures[key]

    def render(self, state: CanvasState, resources: Mapping[TileID, Resource]) -> Image.Image:
        img = Image.new("RGBA", (self.width, self.height), self.background)
        draw = ImageDraw.Draw(img)
        ox = int(round(state.viewport.offset_x))
        oy = int(round(state.viewport.offset_y))

        for tile_id in sorted(state.visible):
            geometry = tile_geometry(state.rect[tile_id], state.grid.cell_size, self.padding)
            if geometry.width <= 0 or geometry.height <= 0:
                continue
            x0, y0 = geometry.x + ox, geometry.y + oy
            draw.rectangle(
                [x0, y0, x0 + geometry.width - 1, y0 + geometry.height - 1],
                fill=self.tile_fill,
            )

            tile = state.tile[tile_id]
            resource = resources.get(tile_id)
            if resource is None or tile.opacity <= 0:
                continue
            clip = clip_to_viewport(
                x0, y0, geometry.width, geometry.height, self.width, self.height
            )
            if clip is None:
                continue
            dest, box = clip
            tex = self.texture(
                tile_id, tile.identity, resource, (geometry.width, geometry.height)
            )
            img.alpha_composite(apply_opacity(tex.crop(box), tile.opacity), dest)

        return img
