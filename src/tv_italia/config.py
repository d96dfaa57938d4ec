"""Configuration management for TV Italia."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Application configuration."""

    # Base paths
    BASE_DIR = Path(__file__).resolve().parent.parent.parent
    DATA_DIR = BASE_DIR / "data"
    LOG_DIR = BASE_DIR / "logs"

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/tv_italia.db")
    CATALOG_KEY = os.getenv("CATALOG_KEY", "tv_italia_channels_v2")

    # Flask settings
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
    FLASK_PORT = int(os.getenv("FLASK_PORT", "8080"))
    DEBUG = os.getenv("DEBUG", "False").lower() == "true"

    # Administrator gate (shared secret, not an access-control boundary)
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

    # Recommendation service
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # News feeds
    RSS_TO_JSON_API = os.getenv("RSS_TO_JSON_API", "https://api.rss2json.com/v1/api.json")
    TICKER_FEED_URL = os.getenv("TICKER_FEED_URL", "https://backend.stiletv.it/h24/bannerh24.xml")
    TICKER_REFRESH_MINUTES = int(os.getenv("TICKER_REFRESH_MINUTES", "2"))
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

    # Video player settings
    PLAYER_BACKEND = os.getenv("PLAYER_BACKEND", "vlc")  # vlc or mpv
    PLAYER_STARTUP_GRACE = float(os.getenv("PLAYER_STARTUP_GRACE", "2.0"))
    FULLSCREEN = os.getenv("FULLSCREEN", "True").lower() == "true"

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = LOG_DIR / "tv_italia.log"

    @classmethod
    def ensure_directories(cls):
        """Create necessary directories if they don't exist."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

config = Config()
