# custody/client/health.py

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

HEALTH_POLL_INTERVAL = 15


class HealthMonitor:
    """Polls the health endpoint in the background and keeps ``online`` current."""

    def __init__(
        self,
        check: Callable[[], bool],
        interval: float = HEALTH_POLL_INTERVAL,
        on_change: Optional[Callable[[bool], None]] = None,
    ):
        self.check = check
        self.interval = interval
        self.on_change = on_change
        self.online = True
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def poll_once(self) -> bool:
        try:
            status = bool(self.check())
        except Exception as e:
            # a failed probe only flips the indicator
            logger.debug("Health probe failed: %r", e)
            status = False

        if status != self.online:
            logger.info("Connectivity changed: %s", "online" if status else "offline")
            self.online = status
            if self.on_change:
                self.on_change(status)

        return status

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll_once()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="health-monitor", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join()
            self._thread = None
