from __future__ import annotations
from typing import Any, Callable, Optional, Tuple
import logging
import threading

from core.config import Config

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Jedno miejsce na zaplanowane wywołanie. Nowy trigger anuluje oczekujące
    wywołanie (nie kolejkuje go) i planuje własne po `delay` sekundach.
    """

    def __init__(self, callback: Callable[..., Any], delay: Optional[float] = None) -> None:
        self.callback = callback
        self.delay = Config.DEBOUNCE_SECONDS if delay is None else delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Tuple[tuple, dict]] = None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.delay, self._fire, args=(self._pending,))
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, scheduled: Tuple[tuple, dict]) -> None:
        with self._lock:
            # timer mógł zostać zastąpiony tuż przed odpaleniem
            if self._pending is not scheduled:
                return
            self._pending = None
            self._timer = None
        args, kwargs = scheduled
        try:
            self.callback(*args, **kwargs)
        except Exception:
            # wątek timera nie ma komu zgłosić błędu – tylko log
            logger.exception("Debounced call failed (args=%r)", args)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> bool:
        """Odpal oczekujące wywołanie od razu. Zwraca False, gdy nic nie czekało."""
        with self._lock:
            scheduled = self._pending
            if scheduled is None:
                return False
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
        args, kwargs = scheduled
        self.callback(*args, **kwargs)
        return True

    @property
    def pending(self) -> bool:
        return self._pending is not None
