"""
Background Expiry Sweeper

Dedup markers expire lazily: a marker past its deadline already reads as
absent. This module adds an optional active sweep that drops expired
markers on a timer so memory does not hold onto a day of stale visitors.

Usage:
    from visitcounter.services.sweeper import init_dedup_sweeper

    # In app factory (visitcounter/__init__.py):
    init_dedup_sweeper(app, service)
"""

import atexit
import logging
import threading


logger = logging.getLogger(__name__)


class DedupSweeper:
    """Daemon thread calling ``service.prune_expired()`` every ``interval`` seconds."""

    def __init__(self, service, interval):
        self.service = service
        self.interval = max(1, int(interval))
        self._shutdown = threading.Event()
        self._thread = None

    @property
    def is_running(self):
        return self._thread is not None and self._thread.is_alive()

    def sweep_once(self):
        """Run a single sweep. Returns the number of markers removed."""
        try:
            removed = self.service.prune_expired()
        except Exception as e:
            # Never kill the sweeper thread over one bad pass
            logger.error(f'Dedup sweep failed: {e}', exc_info=True)
            return 0
        if removed:
            logger.info('Dedup sweep removed %d expired markers', removed)
        return removed

    def _run(self):
        while not self._shutdown.is_set():
            # Wait for the interval or until shutdown
            if self._shutdown.wait(timeout=self.interval):
                break
            self.sweep_once()

    def start(self):
        if self.is_running:
            return
        self._shutdown.clear()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,  # Thread will die when main process dies
            name='DedupSweeper',
        )
        self._thread.start()

    def stop(self, timeout=5):
        self._shutdown.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
            logger.info('Dedup sweeper thread stopped.')
        self._thread = None


def init_dedup_sweeper(app, service):
    """
    Start the expiry sweeper if configured.

    Configuration (set in app.config or environment):
        - COUNTER_SWEEP_INTERVAL_SECONDS: seconds between sweeps; 0 disables
          the sweeper and leaves expiry purely lazy.

    Returns the running sweeper, or None when disabled.
    """
    interval = int(app.config.get('COUNTER_SWEEP_INTERVAL_SECONDS') or 0)
    if interval <= 0:
        app.logger.info('Dedup sweeper is disabled; expired markers are dropped lazily.')
        return None

    sweeper = DedupSweeper(service, interval)
    sweeper.start()
    app.extensions['dedup_sweeper'] = sweeper
    atexit.register(sweeper.stop)
    app.logger.info(f'Dedup sweeper started (every {sweeper.interval}s)')
    return sweeper
