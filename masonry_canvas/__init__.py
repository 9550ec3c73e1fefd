"""Masonry canvas: a lazily loaded, pannable wall of images.

The grid is carved into irregular rectangles by
:mod:`masonry_canvas.partition`; per-frame tile lifecycle (visibility, fetch
issue / cancel, dedupe, fade) is handled by the pure systems wired together in
:mod:`masonry_canvas.step`. :class:`masonry_canvas.session.Session` is the
mutable shell that owns fetches and bound image resources.
"""
