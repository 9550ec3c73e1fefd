import logging
import threading
from io import BytesIO
from typing import Iterator, List, Optional

import pytest
import requests
from PIL import Image

from masonry_canvas.components import FetchRequest
from masonry_canvas.fetch import ResourceFetcher
from masonry_canvas.types import FetchStatus


def _png(color: tuple[int, int, int] = (0, 128, 255)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (6, 4), color).save(buf, "PNG")
    return buf.getvalue()


class FakeResponse:
    def __init__(
        self,
        url: str,
        body: bytes,
        status: int = 200,
        gate: Optional[threading.Event] = None,
    ) -> None:
        self.url = url
        self.body = body
        self.status_code = status
        self.gate = gate
        self.closed = False

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: object) -> None:
        self.closed = True

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        half = len(self.body) // 2
        yield self.body[:half]
        if self.gate is not None:
            self.gate.wait(timeout=5)
        yield self.body[half:]


class FakeHTTP:
    """Stands in for ``requests.Session``; maps URL -> response factory."""

    def __init__(self) -> None:
        self.routes: dict = {}
        self.calls: List[str] = []

    def get(self, url: str, stream: bool = False, timeout: Optional[float] = None) -> FakeResponse:
        self.calls.append(url)
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        return route()


def _fetcher(http: FakeHTTP) -> ResourceFetcher:
    return ResourceFetcher(max_workers=2, timeout=1.0, http=http)  # type: ignore[arg-type]


def test_successful_fetch_reports_identity_and_image() -> None:
    http = FakeHTTP()
    http.routes["https://img.test/a.jpg"] = lambda: FakeResponse(
        "https://cdn.img.test/a.jpg?sig=123", _png()
    )
    fetcher = _fetcher(http)

    fetcher.submit(FetchRequest(3, 1, "https://img.test/a.jpg"))
    assert fetcher.join(timeout=5)
    [outcome] = fetcher.drain()
    fetcher.shutdown()

    assert outcome.status == FetchStatus.LOADED
    assert (outcome.tile_id, outcome.token) == (3, 1)
    assert outcome.identity == "https://cdn.img.test/a.jpg"
    assert outcome.resource.size == (6, 4)
    assert fetcher.in_flight() == 0
    assert fetcher.drain() == []


@pytest.mark.parametrize(
    "route",
    [
        lambda: FakeResponse("https://img.test/bad.jpg", b"", status=404),
        lambda: FakeResponse("https://img.test/bad.jpg", b"not an image"),
        requests.ConnectionError("offline"),
    ],
)
def test_failures_are_reported_not_raised(route: object) -> None:
    http = FakeHTTP()
    http.routes["https://img.test/bad.jpg"] = route
    fetcher = _fetcher(http)

    fetcher.submit(FetchRequest(0, 2, "https://img.test/bad.jpg"))
    assert fetcher.join(timeout=5)
    [outcome] = fetcher.drain()
    fetcher.shutdown()

    assert outcome.status == FetchStatus.FAILED
    assert outcome.identity is None
    assert outcome.token == 2


def test_cancelled_mid_download_produces_no_outcome() -> None:
    gate = threading.Event()
    http = FakeHTTP()
    response = FakeResponse("https://img.test/slow.jpg", _png(), gate=gate)
    http.routes["https://img.test/slow.jpg"] = lambda: response
    fetcher = _fetcher(http)

    fetcher.submit(FetchRequest(1, 1, "https://img.test/slow.jpg"))
    fetcher.cancel(1, 1)
    gate.set()
    assert fetcher.join(timeout=5)
    fetcher.shutdown()

    assert fetcher.drain() == []
    assert fetcher.in_flight() == 0


def test_cancel_after_completion_is_a_noop() -> None:
    http = FakeHTTP()
    http.routes["https://img.test/a.jpg"] = lambda: FakeResponse(
        "https://img.test/a.jpg", _png()
    )
    fetcher = _fetcher(http)

    fetcher.submit(FetchRequest(0, 1, "https://img.test/a.jpg"))
    assert fetcher.join(timeout=5)
    fetcher.cancel(0, 1)
    fetcher.cancel(0, 99)

    assert [o.status for o in fetcher.drain()] == [FetchStatus.LOADED]
    fetcher.shutdown()


def test_cancel_all_covers_every_attempt() -> None:
    gate = threading.Event()
    http = FakeHTTP()
    for i in range(3):
        url = f"https://img.test/{i}.jpg"
        http.routes[url] = (lambda u: lambda: FakeResponse(u, _png(), gate=gate))(url)
    fetcher = _fetcher(http)

    for i in range(3):
        fetcher.submit(FetchRequest(i, 1, f"https://img.test/{i}.jpg"))
    fetcher.cancel_all()
    gate.set()
    assert fetcher.join(timeout=5)
    fetcher.shutdown()

    assert fetcher.drain() == []


def test_failure_is_not_logged_as_warning_by_worker(caplog: pytest.LogCaptureFixture) -> None:
    http = FakeHTTP()
    http.routes["https://img.test/bad.jpg"] = requests.ConnectionError("offline")
    fetcher = _fetcher(http)

    with caplog.at_level(logging.DEBUG, logger="masonry_canvas.fetch"):
        fetcher.submit(FetchRequest(0, 1, "https://img.test/bad.jpg"))
        assert fetcher.join(timeout=5)
    fetcher.shutdown()

    records = [r for r in caplog.records if r.name == "masonry_canvas.fetch"]
    assert records
    assert all(r.levelno < logging.WARNING for r in records)
