"""Periodic refresh of the home news ticker."""

import logging
import threading
import time
from typing import Callable, List, Optional

import schedule

from .config import config
from .news import TickerItem, fetch_ticker

logger = logging.getLogger(__name__)

ROTATE_SECONDS = 8

class TickerScheduler:
    """Keeps the latest ticker items fresh and rotates through them."""

    def __init__(self, fetch: Callable[[], List[TickerItem]] = fetch_ticker,
                 interval_minutes: int = None):
        self.fetch = fetch
        self.interval_minutes = interval_minutes or config.TICKER_REFRESH_MINUTES
        self.scheduler = schedule.Scheduler()
        self.items: List[TickerItem] = []
        self.current_index = 0
        self.running = False
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def setup_schedule(self):
        """Fetch now and every ``interval_minutes`` afterwards, and rotate
        the current item every ``ROTATE_SECONDS``."""
        self.scheduler.clear()
        self.scheduler.every(self.interval_minutes).minutes.do(self.refresh)
        self.scheduler.every(ROTATE_SECONDS).seconds.do(self.advance)
        logger.info(f"Ticker refresh scheduled every {self.interval_minutes} minutes")
        self.refresh()

    def refresh(self) -> List[TickerItem]:
        """Fetch the ticker. An empty result keeps the previous items."""
        items = self.fetch()
        with self._lock:
            if items:
                self.items = list(items)
                self.current_index %= len(self.items)
                logger.info(f"Ticker refreshed with {len(items)} items")
            else:
                logger.warning("Ticker refresh returned nothing, keeping previous items")
            return list(self.items)

    def current(self) -> Optional[TickerItem]:
        with self._lock:
            if not self.items:
                return None
            return self.items[self.current_index]

    def advance(self) -> Optional[TickerItem]:
        """Move to the next item, wrapping around."""
        with self._lock:
            if not self.items:
                return None
            self.current_index = (self.current_index + 1) % len(self.items)
            return self.items[self.current_index]

    def run(self):
        """Run pending jobs until stopped."""
        logger.info("Ticker scheduler started")
        while self.running:
            try:
                self.scheduler.run_pending()
            except Exception as e:
                logger.error(f"Scheduler error: {e}")
            time.sleep(1)
        logger.info("Ticker scheduler stopped")

    def start(self):
        """Set up the schedule and run it in a background thread."""
        if self.running:
            return
        self.running = True
        self.setup_schedule()
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def stop(self):
        self.running = False
        self.scheduler.clear()
