"""Playback logging model."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from .base import Base

class PlaybackLog(Base):
    """Log of playback sessions."""

    __tablename__ = "playback_logs"

    id = Column(Integer, primary_key=True)
    channel_id = Column(String(100), nullable=False)
    channel_name = Column(String(200))
    stream_url = Column(String(1000))
    mode = Column(String(50))
    started_at = Column(DateTime, server_default=func.now())
    ended_at = Column(DateTime)
    status = Column(String(50))  # acquiring, playing, error, closed
    error_message = Column(String(1000))

    def __repr__(self):
        return f"<PlaybackLog(channel='{self.channel_id}', status={self.status})>"
