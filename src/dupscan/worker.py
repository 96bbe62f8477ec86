"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

Background scan worker: runs one ScanCommand on a dedicated daemon thread.
The caller polls is_finished() and reads the SignalChannel meanwhile; it never
has to block on the scan.
"""
import logging
import threading
from typing import Optional

from dupscan.commands import ScanCommand
from dupscan.core.channel import SignalChannel
from dupscan.core.errors import InvalidRootError
from dupscan.core.models import ScanReport, ScanRequest

logger = logging.getLogger(__name__)


class ScanWorker:
    """
    One-shot handle for a background scan.

    Attributes:
        request: ScanRequest to execute
        channel: SignalChannel shared with the caller
        report: ScanReport once the scan has finished successfully
        error: "ExceptionType: message" if the scan raised
    """

    def __init__(self, request: ScanRequest, channel: Optional[SignalChannel] = None,
                 command: Optional[ScanCommand] = None):
        self.request = request
        self.channel = channel or SignalChannel()
        self.command = command or ScanCommand()
        self.report: Optional[ScanReport] = None
        self.error: Optional[str] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "ScanWorker":
        """Clears the channel and starts the scan thread. Returns immediately."""
        if self._thread is not None:
            raise RuntimeError("Scan worker already started")
        self.channel.clear()
        self._thread = threading.Thread(target=self.run, name="dupscan-worker", daemon=True)
        self._thread.start()
        return self

    def run(self) -> None:
        """Main execution method. Runs in the worker thread."""
        try:
            self.report = self.command.execute(self.request, self.channel)
        except InvalidRootError as e:
            self.error = f"{type(e).__name__}: {str(e)}"
        except Exception as e:
            logger.exception("Scan failed")
            self.error = f"{type(e).__name__}: {str(e)}"

    def is_finished(self) -> bool:
        return self._thread is not None and not self._thread.is_alive()

    def stop(self) -> None:
        """Sets the stop flag; the scan winds down at its next check."""
        self.channel.stop()

    def interrupt(self) -> None:
        self.channel.interrupt()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Waits for the thread. Returns True when it has finished."""
        if self._thread is None:
            return False
        self._thread.join(timeout)
        return not self._thread.is_alive()
