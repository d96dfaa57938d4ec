"""Single application entry point that runs the ticker scheduler and web interface."""

import logging
import sys

from .catalog import ChannelCatalog
from .config import config
from .history import PlaybackHistory
from .models import init_db
from .scheduler import TickerScheduler
from .session import PlaybackController
from .web import app, socketio, set_services

logger = logging.getLogger(__name__)

def setup_logging():
    """Setup logging configuration."""
    config.ensure_directories()

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(config.LOG_FILE),
            logging.StreamHandler(sys.stdout)
        ]
    )

class TvItaliaApp:
    """Main TV Italia application: catalog, playback, ticker and web server."""

    def __init__(self):
        self.catalog = None
        self.controller = None
        self.ticker = None

    def setup(self):
        """Load the catalog and wire the web interface."""
        setup_logging()
        logger.info("Starting TV Italia")

        init_db()
        self.catalog = ChannelCatalog()
        self.catalog.load()
        if self.catalog.load_error:
            logger.warning(f"Catalog restored from system channels: {self.catalog.load_error}")

        self.controller = PlaybackController(self.catalog)
        self.ticker = TickerScheduler()
        set_services(self.catalog, self.controller, PlaybackHistory(), self.ticker)

    def run(self):
        """Run the complete TV Italia application."""
        try:
            self.setup()

            self.ticker.start()

            logger.info(f"Starting web server on {config.FLASK_HOST}:{config.FLASK_PORT}")
            socketio.run(
                app,
                host=config.FLASK_HOST,
                port=config.FLASK_PORT,
                debug=config.DEBUG,
                use_reloader=False,
                allow_unsafe_werkzeug=True
            )

        except KeyboardInterrupt:
            logger.info("TV Italia stopped by user")
        except Exception as e:
            logger.error(f"TV Italia application error: {e}")
            sys.exit(1)
        finally:
            self.cleanup()

    def cleanup(self):
        """Cleanup when shutting down."""
        logger.info("Cleaning up TV Italia application")
        if self.controller:
            self.controller.close()
        if self.ticker:
            self.ticker.stop()

def main():
    """Main entry point."""
    TvItaliaApp().run()

if __name__ == "__main__":
    main()
