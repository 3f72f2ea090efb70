"""Rapatriement des résultats des threads de travail vers le thread Tkinter."""

from __future__ import annotations

import logging
import queue
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    import tkinter as tk

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 50


class UiDispatcher:
    """File thread-safe vidée périodiquement par ``root.after``.

    Tkinter n'est pas thread-safe : les threads du pool ne touchent jamais
    aux widgets, ils déposent un rappel ici et le thread principal l'exécute.
    """

    def __init__(self, root: "tk.Misc | None" = None, *, poll_ms: int = POLL_INTERVAL_MS) -> None:
        self._root = root
        self._poll_ms = poll_ms
        self._queue: queue.SimpleQueue[tuple[Callable[..., Any], tuple[Any, ...]]] = queue.SimpleQueue()
        self._after_id: str | None = None

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Planifie ``callback(*args)`` sur le thread de l'UI. Appelable depuis n'importe quel thread."""
        self._queue.put((callback, args))

    def wrap(self, callback: Callable[..., Any]) -> Callable[..., None]:
        return lambda *args: self.post(callback, *args)

    def when_done(self, future: Future, callback: Callable[[Future], Any]) -> None:
        """Appelle ``callback(future)`` sur le thread de l'UI une fois la tâche terminée."""
        future.add_done_callback(lambda done: self.post(callback, done))

    def drain(self) -> int:
        """Exécute tous les rappels en attente et retourne leur nombre."""
        count = 0
        while True:
            try:
                callback, args = self._queue.get_nowait()
            except queue.Empty:
                return count
            count += 1
            try:
                callback(*args)
            except Exception:  # noqa: BLE001
                logger.exception("Échec d'un rappel de l'interface")

    def start(self) -> None:
        if self._root is None or self._after_id is not None:
            return
        self._after_id = self._root.after(self._poll_ms, self._poll)

    def stop(self) -> None:
        if self._root is not None and self._after_id is not None:
            try:
                self._root.after_cancel(self._after_id)
            except ValueError:
                pass
        self._after_id = None

    def _poll(self) -> None:
        self.drain()
        if self._after_id is not None and self._root is not None:
            self._after_id = self._root.after(self._poll_ms, self._poll)
