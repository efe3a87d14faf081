"""
Run logging for configuration recovery.

Messages are only emitted when the run is verbose, prefixed with a
wall-clock timestamp. Output streams are injectable so callers (and tests)
can capture progress without touching global state.
"""

import sys
from datetime import datetime
from typing import Optional, TextIO


def get_time(compact: bool = False) -> str:
    """
    Current local time as a string.

    Args:
        compact: If True, return ``YYYYMMDDHHMMSS`` (used for run identifiers),
            otherwise ``YYYY-MM-DD HH:MM:SS``.
    """
    now = datetime.now()
    if compact:
        return now.strftime("%Y%m%d%H%M%S")
    return now.strftime("%Y-%m-%d %H:%M:%S")


class RunLogger:
    """
    Verbose-gated progress logger.

    Args:
        verbose: Emit messages only when True
        stream: Destination for progress messages (default: stdout)
        error_stream: Destination for error messages (default: stderr)
    """

    def __init__(
        self,
        verbose: bool = False,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
    ):
        self.verbose = verbose
        self._stream = stream
        self._error_stream = error_stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def error_stream(self) -> TextIO:
        return self._error_stream if self._error_stream is not None else sys.stderr

    def log(self, *messages) -> None:
        """Print the concatenated messages with a timestamp prefix."""
        if self.verbose:
            text = "".join(str(m) for m in messages)
            print(f"{get_time()}: {text}", file=self.stream)

    def error(self, *messages) -> None:
        """Print the concatenated messages to the error stream."""
        if self.verbose:
            text = "".join(str(m) for m in messages)
            print(f": {text}", file=self.error_stream)
