"""Playback history recorded from session transitions."""

import logging
from datetime import datetime
from typing import Any, Dict, List

from .models import PlaybackLog, SessionLocal, session_scope

logger = logging.getLogger(__name__)

class PlaybackHistory:
    """Writes one ``PlaybackLog`` row per session and keeps it up to date."""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal
        self._log_ids: Dict[int, int] = {}

    def __call__(self, playback):
        """Session observer."""
        try:
            self.record(playback)
        except Exception as e:
            logger.error(f"Failed to record playback history: {e}")

    def record(self, playback):
        status = playback.state.value
        key = id(playback)

        with session_scope(self.session_factory) as session:
            log_id = self._log_ids.get(key)
            entry = session.get(PlaybackLog, log_id) if log_id is not None else None

            if entry is None:
                entry = PlaybackLog(
                    channel_id=playback.channel.id,
                    channel_name=playback.channel.name,
                    stream_url=playback.channel.stream_url,
                    mode=playback.classification.mode.value,
                )
                session.add(entry)

            if entry.status == status:
                return
            entry.status = status
            if status == "error":
                entry.error_message = (playback.error_detail or playback.error_message or "")[:1000]
            if status in ("error", "closed") and entry.ended_at is None:
                entry.ended_at = datetime.now()
            session.flush()
            self._log_ids[key] = entry.id

        if status == "closed":
            self._log_ids.pop(key, None)

    def recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        with session_scope(self.session_factory) as session:
            logs = session.query(PlaybackLog).order_by(PlaybackLog.id.desc()).limit(limit).all()
            return [{
                'id': log.id,
                'channel_id': log.channel_id,
                'channel_name': log.channel_name,
                'mode': log.mode,
                'status': log.status,
                'error_message': log.error_message,
                'started_at': log.started_at.isoformat() if log.started_at else None,
                'ended_at': log.ended_at.isoformat() if log.ended_at else None,
            } for log in logs]
