"""Streaming input through the formatter into an external pager."""

from __future__ import annotations

import logging
import signal
import subprocess
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager, nullcontext
from typing import BinaryIO

from hless.core.formatter import Formatter

logger = logging.getLogger(__name__)

# -n: skip line number computation, -R: pass raw ANSI sequences, -: read stdin
DEFAULT_PAGER: tuple[str, ...] = ("less", "-n", "-R", "-")

CHUNK_SIZE = 64 * 1024


class PagerError(RuntimeError):
    """The pager could not be started or exited with a failure status."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


@contextmanager
def ignore_interrupt() -> Iterator[None]:
    """Ignore SIGINT for the duration of the block.

    The pager owns the terminal while it runs and decides for itself what an
    interrupt means. The previous handler is restored on exit. Signal handlers
    can only be changed from the main thread, elsewhere this does nothing.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        # None means the handler was not installed from Python
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)


def strip_terminator(line: str) -> str:
    """Remove a trailing ``\\n`` or ``\\r\\n``."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def read_lines(source: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the lines of a binary stream, terminators included.

    Plain ``read`` calls are used instead of line iteration so that an
    unbuffered source returns whatever input is available right away, and a
    thread blocked here holds no buffered-reader lock when the interpreter
    shuts down.
    """
    parts: list[bytes] = []
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break

        start = 0
        end = chunk.find(b"\n")
        while end != -1:
            parts.append(chunk[start : end + 1])
            yield b"".join(parts)
            parts.clear()
            start = end + 1
            end = chunk.find(b"\n", start)

        if start < len(chunk):
            parts.append(chunk[start:])

    if parts:
        yield b"".join(parts)


def write_all(sink: BinaryIO, data: bytes) -> None:
    """Write all of data to an unbuffered sink, which may accept it in pieces."""
    while data:
        written = sink.write(data)
        data = data[written:]


class PipelineRunner:
    """Feeds formatted lines to a pager running concurrently."""

    def __init__(
        self,
        formatter: Formatter,
        pager: Sequence[str] = DEFAULT_PAGER,
        ignore_interrupt: bool = True,
        exclude: Sequence[str] = (),
        encoding: str = "utf-8",
    ) -> None:
        """Initialize runner.

        Args:
            formatter: Formatter applied to every line
            pager: Pager command and arguments
            ignore_interrupt: Ignore SIGINT in this process while the pager runs
            exclude: Lines containing any of these strings are dropped
            encoding: Encoding of the input and of the bytes sent to the pager
        """
        self.formatter = formatter
        self.pager = tuple(pager)
        self.ignore_interrupt = ignore_interrupt
        self.exclude = tuple(e for e in exclude if e)
        self.encoding = encoding

    def is_excluded(self, line: str) -> bool:
        return any(text in line for text in self.exclude)

    def stream(self, source: BinaryIO, sink: BinaryIO) -> None:
        """Copy source to sink line by line, formatting each line.

        Stops quietly when the sink can no longer be written to, which is what
        happens when the user quits the pager before the input is exhausted.
        The sink is always closed on return.

        Args:
            source: Binary input stream
            sink: Binary stream connected to the pager's stdin
        """
        written = 0
        try:
            for raw in read_lines(source):
                line = strip_terminator(raw.decode(self.encoding, "surrogateescape"))
                if self.is_excluded(line):
                    continue

                data = (self.formatter.format(line) + "\n").encode(self.encoding, "surrogateescape")
                try:
                    write_all(sink, data)
                except OSError as e:
                    logger.debug("Pager stopped reading after %d lines: %s", written, e)
                    return
                written += 1
            logger.debug("Input exhausted after %d lines", written)
        except OSError as e:
            logger.error("Error reading input: %s", e)
        except ValueError as e:
            # Source closed under us at shutdown
            logger.debug("Input closed: %s", e)
        finally:
            try:
                sink.close()
            except OSError as e:
                logger.debug("Discarded unsent output: %s", e)

    def spawn(self) -> subprocess.Popen[bytes]:
        """Start the pager with a pipe for its stdin and our stdout as its stdout.

        Raises:
            PagerError: If the pager cannot be started
        """
        if not self.pager:
            raise PagerError("no pager command configured")

        try:
            process = subprocess.Popen(self.pager, stdin=subprocess.PIPE, bufsize=0)
        except OSError as e:
            raise PagerError(f"cannot start pager '{self.pager[0]}': {e}") from e

        if process.stdin is None:
            process.kill()
            process.wait()
            raise PagerError("cannot open pipe to pager")

        logger.debug("Started pager %s (pid %d)", " ".join(self.pager), process.pid)
        return process

    def run(self, source: BinaryIO) -> int:
        """Run the pager and stream source into it until the pager exits.

        The streaming thread is not joined: it closes the pipe itself as soon
        as it stops, and a read blocked on an idle input must not keep the
        program alive once the pager is gone.

        Args:
            source: Binary input stream

        Returns:
            The pager's exit status (always 0)

        Raises:
            PagerError: If the pager cannot be started or exits with a failure
        """
        process = self.spawn()
        writer = threading.Thread(
            target=self.stream,
            args=(source, process.stdin),
            name="hless-stream",
            daemon=True,
        )

        guard = ignore_interrupt() if self.ignore_interrupt else nullcontext()
        with guard:
            writer.start()
            returncode = process.wait()

        logger.debug("Pager exited with status %d", returncode)
        if returncode != 0:
            raise PagerError(f"pager exited with status {returncode}", returncode=returncode)
        return returncode
