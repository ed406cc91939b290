# bridge.py
"""Hand state changes from HTTP worker threads to the window's thread.

Workers call ``schedule`` with a closure and return at once; the thread that
owns the window runs the closures one at a time from its event loop (through
``attach``) or, without a window, from ``run_forever``. Closures submitted by
one thread run in submission order.
"""
import logging
import queue
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Mutation = Callable[[], None]


class EventBridge:
    def __init__(self):
        self._queue: "queue.SimpleQueue[Mutation]" = queue.SimpleQueue()
        self._listeners: List[Callable[[], None]] = []

    def schedule(self, mutation: Mutation) -> None:
        """Queue mutation for the draining thread; never blocks."""
        self._queue.put(mutation)

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Run callback on the draining thread after each applied mutation."""
        self._listeners.append(callback)

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self, limit: Optional[int] = None) -> int:
        """Apply queued mutations on the calling thread; return how many ran."""
        done = 0
        while limit is None or done < limit:
            try:
                mutation = self._queue.get_nowait()
            except queue.Empty:
                break
            self._apply(mutation)
            done += 1
        return done

    def _apply(self, mutation: Mutation) -> None:
        try:
            mutation()
        except Exception:
            logger.exception("Scheduled mutation failed")
        for callback in self._listeners:
            try:
                callback()
            except Exception:
                logger.exception("Bridge listener failed")

    def attach(self, root, interval_ms: int = 50) -> None:
        """Drain from a tkinter root's event loop until the window is gone."""
        def tick():
            self.drain()
            root.after(interval_ms, tick)
        root.after(interval_ms, tick)

    def run_forever(self, stop: threading.Event, poll: float = 0.1) -> None:
        while not stop.is_set():
            try:
                mutation = self._queue.get(timeout=poll)
            except queue.Empty:
                continue
            self._apply(mutation)
