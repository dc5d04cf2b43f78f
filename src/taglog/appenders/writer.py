from __future__ import annotations

import codecs
import io
import sys
from typing import IO, Any

from ..core import diagnostics
from ..core.events import LogEvent
from ..core.formatters import Formatter
from ..core.levels import LevelLike, LogLevel
from . import BaseAppender


def _is_text_stream(stream: IO[Any]) -> bool:
    """Return True when ``stream.write`` expects ``str``.

    File wrappers such as ``tempfile.NamedTemporaryFile`` do not subclass
    ``io.TextIOBase``, so their ``mode`` is consulted as well.
    """
    if isinstance(stream, (io.TextIOBase, codecs.StreamWriter)):
        return True
    mode = getattr(stream, "mode", None)
    return isinstance(mode, str) and "b" not in mode


class WriterAppender(BaseAppender):
    """Write one rendered line per admitted event to a stream.

    - Binary streams receive UTF-8 bytes, text streams receive ``str``
    - The stream is flushed after every line
    - Write errors are counted and reported, never raised
    """

    name = "writer"

    def __init__(
        self,
        stream: IO[Any] | None = None,
        *,
        level: LevelLike = LogLevel.DEBUG,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(level=level, formatter=formatter)
        self._stream = stream
        self._error_count = 0
        self._last_error: BaseException | None = None

    @property
    def stream(self) -> IO[Any] | None:
        return self._resolve_stream()

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def last_error(self) -> BaseException | None:
        return self._last_error

    def _resolve_stream(self) -> IO[Any] | None:
        return self._stream

    def _write(self, event: LogEvent, formatter: Formatter) -> None:
        try:
            line = self.render(event, formatter) + "\n"
            stream = self._resolve_stream()
            if stream is None:
                raise ValueError("no stream to write to")
            if _is_text_stream(stream):
                stream.write(line)
            else:
                stream.write(line.encode("utf-8", errors="replace"))
            flush = getattr(stream, "flush", None)
            if flush is not None:
                flush()
        except Exception as exc:
            # Contain appender errors; a dropped line beats a crashed host
            self._error_count += 1
            self._last_error = exc
            diagnostics.warn(
                "appender",
                "write error",
                appender=self.name,
                error_type=type(exc).__name__,
                error=str(exc),
                _rate_limit_key=f"appender-write:{self.name}",
            )


class StdOutAppender(WriterAppender):
    """Writer appender bound to the current ``sys.stdout``."""

    name = "stdout"

    def __init__(
        self,
        *,
        level: LevelLike = LogLevel.DEBUG,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(None, level=level, formatter=formatter)

    def _resolve_stream(self) -> IO[Any] | None:
        # Looked up per write so redirected or captured streams are honored
        return sys.stdout


class StdErrAppender(WriterAppender):
    """Writer appender bound to the current ``sys.stderr``."""

    name = "stderr"

    def __init__(
        self,
        *,
        level: LevelLike = LogLevel.DEBUG,
        formatter: Formatter | None = None,
    ) -> None:
        super().__init__(None, level=level, formatter=formatter)

    def _resolve_stream(self) -> IO[Any] | None:
        return sys.stderr
