"""Rendering subpackage.

Turns :class:`masonry_canvas.state.CanvasState` snapshots plus the session's
bound resources into frames. The default compositor is Pillow + NumPy based:

* One solid rectangle per visible tile (the placeholder shown while loading).
* Each bound image fitted to its tile and blended with the tile's opacity.
* Everything translated by the viewport offset and clipped to the viewport.

See :mod:`masonry_canvas.renderer.texture`.
"""
