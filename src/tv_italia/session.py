"""Playback sessions.

A session plays one channel once::

    IDLE -> ACQUIRING -> PLAYING -> CLOSED
                 \\           \\
                  +-> ERROR <-+ -> CLOSED

``ERROR`` ends the session's playback for good; retrying means opening a
new session. Every way out of ``ACQUIRING``/``PLAYING`` releases the
delivery handler, and callbacks from an abandoned acquisition are ignored.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .channel import Channel
from .classifier import classify_channel
from .player import create_handler

logger = logging.getLogger(__name__)

STREAM_ERROR_MESSAGE = (
    "Impossibile caricare il flusso video. Verifica che il link sia corretto e attivo."
)


class SessionState(str, Enum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    PLAYING = "playing"
    ERROR = "error"
    CLOSED = "closed"


class PlaybackSession:
    """Lifecycle of one channel playback and its metrics side effects."""

    def __init__(self, channel: Channel, catalog, handler_factory=create_handler):
        self.channel = channel
        self.catalog = catalog
        self.classification = classify_channel(channel)
        self.handler_factory = handler_factory
        self.handler = None
        self.state = SessionState.IDLE
        self.error_message: Optional[str] = None
        self.error_detail: Optional[str] = None
        self.rating = channel.rating
        self._attempt = 0
        self._view_recorded = False
        self._observers: List[Callable[["PlaybackSession"], None]] = []
        self._lock = threading.RLock()

    def subscribe(self, callback: Callable[["PlaybackSession"], None]):
        """Call ``callback(session)`` after every state change."""
        self._observers.append(callback)

    def open(self) -> SessionState:
        """Record the view and start acquiring the stream."""
        with self._lock:
            if self.state is not SessionState.IDLE:
                logger.warning(f"Session for '{self.channel.id}' already opened ({self.state.value})")
                return self.state

            self._record_view()
            self._attempt += 1
            token = self._attempt
            self.handler = self.handler_factory(self.classification)
            self._set_state(SessionState.ACQUIRING)

            logger.info(f"Opening {self.classification.mode.value} playback for {self.channel.name}")
            try:
                self.handler.start(
                    lambda: self._on_ready(token),
                    lambda message, fatal=True: self._on_error(token, message),
                )
            except Exception as e:
                logger.error(f"Failed to start playback for '{self.channel.id}': {e}", exc_info=True)
                self._on_error(token, str(e))
            return self.state

    def close(self):
        """Release everything and end the session. Safe from any state."""
        with self._lock:
            if self.state is SessionState.CLOSED:
                return
            self._attempt += 1
            self._release()
            self._set_state(SessionState.CLOSED)
            logger.info(f"Closed playback for {self.channel.name}")

    def set_rating(self, rating: int) -> bool:
        """Rate the channel 1-5. Works in every state, including errors."""
        updated = self.catalog.rate(self.channel.id, rating)
        if updated is None:
            return False
        with self._lock:
            self.rating = updated.rating
            self._notify()
        return True

    @property
    def embed_url(self) -> Optional[str]:
        handler = self.handler
        return handler.embed_url if handler is not None else None

    def status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "channel_id": self.channel.id,
                "channel_name": self.channel.name,
                "state": self.state.value,
                "mode": self.classification.mode.value,
                "location": self.classification.location,
                "embed_url": self.embed_url,
                "rating": self.rating,
                "error": self.error_message,
                "retry_url": self.channel.stream_url if self.state is SessionState.ERROR else None,
            }

    def _record_view(self):
        if self._view_recorded:
            return
        self._view_recorded = True
        self.catalog.record_view(self.channel.id)

    def _on_ready(self, token: int):
        with self._lock:
            if token != self._attempt or self.state is not SessionState.ACQUIRING:
                logger.debug(f"Ignoring stale ready callback for '{self.channel.id}'")
                return
            self._set_state(SessionState.PLAYING)
            logger.info(f"Playing: {self.channel.name}")

    def _on_error(self, token: int, message: str):
        with self._lock:
            if token != self._attempt or self.state not in (SessionState.ACQUIRING, SessionState.PLAYING):
                logger.debug(f"Ignoring stale error callback for '{self.channel.id}': {message}")
                return
            self.error_message = STREAM_ERROR_MESSAGE
            self.error_detail = message
            self._release()
            self._set_state(SessionState.ERROR)
            logger.error(f"Playback failed for {self.channel.name}: {message}")

    def _release(self):
        handler, self.handler = self.handler, None
        if handler is None:
            return
        try:
            handler.release()
        except Exception as e:
            logger.error(f"Failed to release playback for '{self.channel.id}': {e}")

    def _set_state(self, state: SessionState):
        self.state = state
        self._notify()

    def _notify(self):
        for callback in list(self._observers):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Session observer failed: {e}")


class PlaybackController:
    """Holds the active session; selecting a channel tears down the old one."""

    def __init__(self, catalog, handler_factory=create_handler):
        self.catalog = catalog
        self.handler_factory = handler_factory
        self.session: Optional[PlaybackSession] = None
        self._observers: List[Callable[[PlaybackSession], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[PlaybackSession], None]):
        """Observe every session opened from now on."""
        self._observers.append(callback)

    def select(self, channel: Channel) -> PlaybackSession:
        with self._lock:
            if self.session is not None:
                self.session.close()
            session = PlaybackSession(channel, self.catalog, self.handler_factory)
            for callback in self._observers:
                session.subscribe(callback)
            self.session = session
            session.open()
            return session

    def close(self):
        with self._lock:
            if self.session is not None:
                self.session.close()

    def status(self) -> Optional[Dict[str, Any]]:
        session = self.session
        return session.status() if session is not None else None
