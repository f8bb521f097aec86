import logging
import os
from typing import BinaryIO

from redpanda.errors import IoFailure, LockFailure

log = logging.getLogger(__name__)


class Sink:
    """Binary output shared by text and image frames, turning OS errors into IoFailure."""

    def __init__(self, stream: BinaryIO, unbuffered: bool = False):
        self.stream = stream
        self.unbuffered = unbuffered

    def write(self, data: bytes) -> None:
        try:
            self.stream.write(data)
        except OSError as exc:
            raise IoFailure(f"write error: {exc.strerror or exc}", path="stdout", operation="write") from exc

    def flush(self) -> None:
        try:
            self.stream.flush()
        except OSError as exc:
            raise IoFailure(f"write error: {exc.strerror or exc}", path="stdout", operation="flush") from exc

    def line_flush(self):
        """Flush callback for the text path; None unless output is unbuffered."""
        return self.flush if self.unbuffered else None


def lock_output(stream: BinaryIO) -> None:
    """Take an exclusive advisory lock on the output, held until the process exits."""
    try:
        import fcntl
    except ImportError:
        log.warning("advisory locking is not available on %s; continuing without -l", os.name)
        return

    try:
        fcntl.flock(stream.fileno(), fcntl.LOCK_EX)
    except OSError as exc:
        raise LockFailure(f"cannot lock output: {exc.strerror or exc}", path="stdout", operation="lock") from exc
    log.debug("locked output fd %d", stream.fileno())
