"""Delivery-mode handlers and the external stream player."""

import subprocess
import logging
import threading
from typing import Callable, Optional

from .classifier import Classification, DeliveryMode, embed_url
from .config import config

logger = logging.getLogger(__name__)

ReadyCallback = Callable[[], None]
ErrorCallback = Callable[[str, bool], None]

class StreamPlayer:
    """Plays an adaptive or direct media stream in an external player process.

    ``load`` returns immediately. ``on_ready`` fires once the process has
    survived the startup grace period, ``on_error(message, fatal)`` fires
    for player errors: fatal when the process exits on its own, non-fatal
    for error lines on stderr.
    """

    def __init__(self, backend: str = None, startup_grace: float = None):
        self.backend = backend or config.PLAYER_BACKEND
        self.startup_grace = config.PLAYER_STARTUP_GRACE if startup_grace is None else startup_grace
        self.current_process: Optional[subprocess.Popen] = None
        self.current_url: Optional[str] = None
        self._destroyed = False
        self._lock = threading.Lock()

    def load(self, url: str, on_ready: ReadyCallback, on_error: ErrorCallback):
        """Start playing ``url``."""
        if self.backend == "vlc":
            cmd = self._get_vlc_command(url)
        elif self.backend == "mpv":
            cmd = self._get_mpv_command(url)
        else:
            on_error(f"Unknown player backend: {self.backend}", True)
            return

        logger.info(f"Running {self.backend} command: {' '.join(cmd)}")
        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                bufsize=1,
                universal_newlines=True,
            )
        except OSError as e:
            logger.error(f"Failed to start {self.backend}: {e}")
            on_error(f"Could not start the {self.backend} player: {e}", True)
            return

        with self._lock:
            if self._destroyed:
                self._terminate(process)
                return
            self.current_process = process
            self.current_url = url

        threading.Thread(
            target=self._monitor_stderr,
            args=(process, on_error),
            daemon=True
        ).start()
        threading.Thread(
            target=self._watch,
            args=(process, on_ready, on_error),
            daemon=True
        ).start()

    def destroy(self):
        """Stop the player process. Safe to call more than once."""
        with self._lock:
            self._destroyed = True
            process, self.current_process = self.current_process, None
            self.current_url = None
        if process is not None:
            self._terminate(process)
            logger.info("Stopped stream playback")

    def is_playing(self) -> bool:
        process = self.current_process
        return process is not None and process.poll() is None

    def _terminate(self, process: subprocess.Popen):
        try:
            process.terminate()
            try:
                process.wait(timeout=0.5)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait(timeout=2)
        except Exception as e:
            logger.error(f"Failed to stop player process: {e}")

    def _watch(self, process: subprocess.Popen, on_ready: ReadyCallback, on_error: ErrorCallback):
        try:
            process.wait(timeout=self.startup_grace)
        except subprocess.TimeoutExpired:
            if not self._destroyed:
                on_ready()
            process.wait()

        if not self._destroyed:
            logger.error(f"{self.backend} exited with code {process.returncode}")
            on_error(f"The stream stopped ({self.backend} exit code {process.returncode})", True)

    def _monitor_stderr(self, process: subprocess.Popen, on_error: ErrorCallback):
        """Monitor stderr output from the player process."""
        try:
            for line in process.stderr:
                line = line.strip()
                if not line:
                    continue
                if "error" in line.lower() or "failed" in line.lower():
                    on_error(line, False)
                else:
                    logger.debug(f"{self.backend} stderr: {line}")
        except Exception as e:
            logger.debug(f"Error monitoring stderr: {e}")

    def _get_vlc_command(self, url: str) -> list:
        """Get VLC command for CLI playback."""
        cmd = [
            "cvlc",
            "--intf", "dummy",
            "--no-video-title-show",
            "--quiet",
        ]
        if config.FULLSCREEN:
            cmd.append("--fullscreen")
        cmd.append(url)
        return cmd

    def _get_mpv_command(self, url: str) -> list:
        """Get MPV command for CLI playback."""
        cmd = [
            "mpv",
            "--no-input-default-bindings",
            "--no-osc",
            "--no-input-cursor",
        ]
        if config.FULLSCREEN:
            cmd.append("--fullscreen")
        cmd.append(url)
        return cmd


class EmbedHandler:
    """Embedded YouTube player or generic web page.

    Nothing is negotiated here: the embed is ready as soon as it exists and
    failures inside the embedded page are not observable.
    """

    def __init__(self, classification: Classification):
        self.classification = classification
        self.embed_url: Optional[str] = None

    def start(self, on_ready: ReadyCallback, on_error: ErrorCallback):
        self.embed_url = embed_url(self.classification)
        logger.info(f"Embedding {self.classification.mode.value}: {self.embed_url}")
        on_ready()

    def release(self):
        if self.embed_url is not None:
            logger.debug(f"Detached embed {self.embed_url}")
        self.embed_url = None


class AdaptiveStreamHandler:
    """Drives a stream client for an adaptive or direct media stream."""

    def __init__(self, classification: Classification, client_factory=StreamPlayer):
        self.classification = classification
        self.client_factory = client_factory
        self.client = None
        self._lock = threading.Lock()

    @property
    def embed_url(self) -> Optional[str]:
        return None

    def start(self, on_ready: ReadyCallback, on_error: ErrorCallback):
        client = self.client_factory()
        with self._lock:
            self.client = client

        def handle_error(message: str, fatal: bool):
            if not fatal:
                logger.warning(f"Stream warning: {message}")
                return
            logger.error(f"Fatal stream error: {message}")
            self.release()
            on_error(message, True)

        client.load(self.classification.location, on_ready, handle_error)

    def release(self):
        with self._lock:
            client, self.client = self.client, None
        if client is not None:
            client.destroy()


def create_handler(classification: Classification, client_factory=StreamPlayer):
    """Handler for the delivery mode of ``classification``."""
    if classification.mode is DeliveryMode.ADAPTIVE_STREAM:
        return AdaptiveStreamHandler(classification, client_factory)
    return EmbedHandler(classification)
