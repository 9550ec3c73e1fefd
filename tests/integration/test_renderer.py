from dataclasses import replace

from pyrsistent import pset

from masonry_canvas.components import Rect, TileState
from masonry_canvas.renderer.texture import (
    DEFAULT_BACKGROUND,
    DEFAULT_TILE_FILL,
    CanvasRenderer,
    clip_to_viewport,
)
from tests.test_utils import make_canvas_state, solid_image

RED = (255, 0, 0, 255)


def _state(opacity: float, offset: tuple[float, float] = (0.0, 0.0)):  # type: ignore[no-untyped-def]
    state = make_canvas_state(
        [Rect(0, 0, 2, 2), Rect(2, 0, 2, 2)],
        columns=4,
        rows=2,
        viewport=(40, 20),
        offset=offset,
        tiles={0: TileState(discovered=True, loaded=True, opacity=opacity, token=1, identity="a")},
    )
    return replace(state, visible=pset([0, 1]))


def test_loaded_tile_drawn_with_image_and_placeholder_for_others() -> None:
    renderer = CanvasRenderer(40, 20, padding=2)
    img = renderer.render(_state(1.0), {0: solid_image(RED)})

    assert img.size == (40, 20)
    assert img.getpixel((5, 5)) == RED
    assert img.getpixel((25, 5)) == DEFAULT_TILE_FILL
    # gutter between tiles shows the background
    assert img.getpixel((19, 5)) == DEFAULT_BACKGROUND


def test_transparent_tile_shows_placeholder() -> None:
    renderer = CanvasRenderer(40, 20, padding=2)
    img = renderer.render(_state(0.0), {0: solid_image(RED)})
    assert img.getpixel((5, 5)) == DEFAULT_TILE_FILL


def test_half_faded_tile_blends_over_placeholder() -> None:
    renderer = CanvasRenderer(40, 20, padding=2)
    r, g, b, a = renderer.render(_state(0.5), {0: solid_image(RED)}).getpixel((5, 5))
    assert 120 <= r <= 135
    assert (g, b, a) == (0, 0, 255)


def test_offscreen_portion_is_clipped() -> None:
    renderer = CanvasRenderer(40, 20, padding=2)
    img = renderer.render(_state(1.0, offset=(-10.0, -5.0)), {0: solid_image(RED)})
    assert img.getpixel((0, 0)) == RED
    assert img.getpixel((7, 12)) == RED
    assert img.getpixel((9, 5)) == DEFAULT_BACKGROUND


def test_resize_changes_output_size() -> None:
    renderer = CanvasRenderer(40, 20)
    renderer.resize(64, 48)
    assert renderer.render(_state(1.0), {}).size == (64, 48)


def test_clip_to_viewport() -> None:
    assert clip_to_viewport(-5, -5, 10, 10, 20, 20) == ((0, 0), (5, 5, 10, 10))
    assert clip_to_viewport(15, 0, 10, 10, 20, 20) == ((15, 0), (0, 0, 5, 10))
    assert clip_to_viewport(25, 0, 10, 10, 20, 20) is None
