"""Cancellable background image fetching.

The lifecycle systems only describe fetches (``FetchRequest`` / ``FetchCancel``);
this module performs them. :class:`ResourceFetcher` runs each request on a
thread pool with a ``requests.Session``, decodes the body with Pillow and
queues a :class:`FetchOutcome` for the tick thread to :meth:`drain`.

Cancellation is cooperative: each attempt owns a ``threading.Event`` that is
checked before the request, between streamed chunks and before the outcome is
queued. A cancelled attempt never produces an outcome, though its socket may
stay open until the current chunk arrives. Cancelling an attempt that already
finished (or failed) is a no-op.
"""

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from typing import Callable, Dict, List, Optional, Protocol, Set, Tuple

import requests

from masonry_canvas.components import FetchOutcome, FetchRequest
from masonry_canvas.errors import FetchAborted, FetchFailed
from masonry_canvas.pool import canonical_identity
from masonry_canvas.types import FetchStatus, Identity, Resource, TileID
from masonry_canvas.utils.image import decode_image

log = logging.getLogger(__name__)

Decoder = Callable[[bytes], Resource]

_CHUNK_SIZE = 64 * 1024


class Fetcher(Protocol):
    """Network capability consumed by :class:`masonry_canvas.session.Session`."""

    def submit(self, request: FetchRequest) -> None: ...

    def cancel(self, tile_id: TileID, token: int) -> None: ...

    def cancel_all(self) -> None: ...

    def drain(self) -> List[FetchOutcome]: ...

    def shutdown(self, wait: bool = False) -> None: ...


class ResourceFetcher:
    """Thread pool fetcher backed by ``requests``.

    Arguments:
        max_workers: Concurrent downloads.
        timeout: Per request timeout in seconds; ``None`` waits forever.
        http: Session to issue requests with (a new one is created if omitted).
        decode: Turns the response body into a resource handle.
    """

    def __init__(
        self,
        max_workers: int = 8,
        timeout: Optional[float] = 15.0,
        http: Optional[requests.Session] = None,
        decode: Decoder = decode_image,
    ) -> None:
        self.timeout = timeout
        self._http = http if http is not None else requests.Session()
        self._decode = decode
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="masonry-fetch"
        )
        self._outcomes: "queue.Queue[FetchOutcome]" = queue.Queue()
        self._lock = threading.Lock()
        self._inflight: Dict[Tuple[TileID, int], threading.Event] = {}
        self._futures: Set["Future[None]"] = set()

    def submit(self, request: FetchRequest) -> None:
        cancelled = threading.Event()
        with self._lock:
            self._inflight[(request.tile_id, request.token)] = cancelled
        future = self._executor.submit(self._run, request, cancelled)
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)

    def cancel(self, tile_id: TileID, token: int) -> None:
        with self._lock:
            cancelled = self._inflight.pop((tile_id, token), None)
        if cancelled is not None:
            cancelled.set()

    def cancel_all(self) -> None:
        with self._lock:
            pending = list(self._inflight.values())
            self._inflight.clear()
        for cancelled in pending:
            cancelled.set()
        if pending:
            log.debug("Cancelled %d in-flight fetches", len(pending))

    def drain(self) -> List[FetchOutcome]:
        """Return every outcome queued since the last call, without blocking."""
        outcomes: List[FetchOutcome] = []
        while True:
            try:
                outcomes.append(self._outcomes.get_nowait())
            except queue.Empty:
                return outcomes

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for submitted fetches to finish; True if none is left running."""
        with self._lock:
            futures = list(self._futures)
        _, not_done = wait_futures(futures, timeout=timeout)
        return not not_done

    def in_flight(self) -> int:
        with self._lock:
            return len(self._inflight)

    def shutdown(self, wait: bool = False) -> None:
        self.cancel_all()
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _forget(self, future: "Future[None]") -> None:
        with self._lock:
            self._futures.discard(future)

    def _run(self, request: FetchRequest, cancelled: threading.Event) -> None:
        try:
            identity, resource = self._fetch(request.url, cancelled)
            outcome = FetchOutcome(
                request.tile_id, request.token, FetchStatus.LOADED, identity, resource
            )
        except FetchAborted:
            log.debug("Fetch for tile %d aborted", request.tile_id)
            return
        except FetchFailed as exc:
            log.debug("Fetch for tile %d failed: %s", request.tile_id, exc)
            outcome = FetchOutcome(request.tile_id, request.token, FetchStatus.FAILED)
        finally:
            with self._lock:
                key = (request.tile_id, request.token)
                if self._inflight.get(key) is cancelled:
                    del self._inflight[key]

        if cancelled.is_set():
            return
        self._outcomes.put(outcome)

    def _fetch(self, url: str, cancelled: threading.Event) -> Tuple[Identity, Resource]:
        if cancelled.is_set():
            raise FetchAborted(url)
        try:
            with self._http.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                chunks: List[bytes] = []
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if cancelled.is_set():
                        raise FetchAborted(url)
                    chunks.append(chunk)
                resolved_url = response.url or url
        except requests.RequestException as exc:
            raise FetchFailed(url, exc) from exc

        if cancelled.is_set():
            raise FetchAborted(url)
        try:
            resource = self._decode(b"".join(chunks))
        except OSError as exc:
            raise FetchFailed(url, exc) from exc
        return canonical_identity(resolved_url), resource
