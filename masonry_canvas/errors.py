"""Exception types.

Only :class:`GridSpecError` ever reaches callers; the fetch errors are raised
inside fetch workers and folded into :class:`masonry_canvas.components.FetchOutcome`
values.
"""


class GridSpecError(ValueError):
    """Grid specification cannot be partitioned (non-positive or too small)."""


class FetchAborted(Exception):
    """Fetch attempt was cancelled; never reported as a failure."""


class FetchFailed(Exception):
    """Network or decode error for one fetch attempt."""

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
