from __future__ import annotations

import threading


class OneShotToken:
    """Owned by the call site; the first ``claim()`` wins, later ones get False.

    Hosts may start the same view twice for one logical screen. Creating the
    token with the view and passing it to the flow keeps the second start from
    issuing a second paid request.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claimed = False

    def claim(self) -> bool:
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            return True

    @property
    def claimed(self) -> bool:
        return self._claimed


class CancellationFlag:
    """Set when the owning view goes away; flows check it before any effect.

    Nothing is cancelled on the wire, only local state and history writes are
    skipped.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
