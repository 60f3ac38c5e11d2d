"""Background sweeper for the in-memory token store.

Classes:
    Janitor: Daemon thread calling a sweep function on a fixed interval until stopped.

Example:
    >>> janitor = Janitor(interval=60, sweep=store.delete_expired)
    >>> janitor.start()
    >>> ...
    >>> janitor.stop()
"""

import logging
import threading
from collections.abc import Callable


logger = logging.getLogger(__name__)


class Janitor:
    """Run `sweep()` every `interval` seconds on a daemon thread.

    The thread waits on a threading.Event, so stop() wakes it immediately
    instead of waiting for the current interval to elapse.
    """

    def __init__(self, interval: float, sweep: Callable[[], int], name: str = 'shortie-janitor'):
        if interval <= 0:
            raise ValueError(f'Janitor interval must be positive (given value: {interval}).')

        self.interval = interval
        self._sweep = sweep
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> 'Janitor':
        self._thread.start()
        logger.debug('Janitor started.', extra={'interval': self.interval})
        return self

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stopped.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        logger.debug('Janitor stopped.')

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                removed = self._sweep()
            except Exception:
                # Keep sweeping on the next tick
                logger.exception('Expired entry sweep failed.')
            else:
                if removed:
                    logger.debug('Swept %s expired entries.', removed, extra={'removed': removed})
