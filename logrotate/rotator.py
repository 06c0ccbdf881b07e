"""Rotation engine: writes input lines to a file, rotating it by size."""

import logging
import os
import sys

from logrotate.archive import next_rotation_index
from logrotate.compressor import BackgroundCompressor
from logrotate.metrics import RotatorStats

logger = logging.getLogger(__name__)


def read_lines(stream):
    """Yield lines from a binary stream without their line terminator.

    A trailing ``\\r`` is dropped with the ``\\n``. A final line without a
    newline is still yielded. A read error ends the stream.
    """
    while True:
        try:
            raw = stream.readline()
        except OSError as exc:
            logger.error("Reading input failed, stopping: %s", exc)
            return
        if not raw:
            return
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        yield raw


class Rotator:
    """Reads lines from *in_stream* and appends them to *filename*.

    Once the active file holds ``threshold_kb * 1000`` bytes or more, the
    next line triggers a rotation: the file is renamed to ``<filename>.<n>``,
    a fresh file is opened in its place, and the retired file is gzipped in
    the background.

    Raises OSError if the output file can't be opened.
    """

    def __init__(
        self,
        in_stream,
        filename: str,
        threshold_kb: int = 5000,
        tee: bool = False,
        tee_stream=None,
        compressor: BackgroundCompressor | None = None,
        stats: RotatorStats | None = None,
    ):
        self._in = in_stream
        self._filename = filename
        self._threshold = 1000 * threshold_kb
        self._tee = tee
        if tee and tee_stream is None:
            tee_stream = sys.stdout.buffer
        self._tee_stream = tee_stream
        self._stats = stats or RotatorStats()
        self._compressor = compressor or BackgroundCompressor(stats=self._stats)

        self._out = open(filename, "ab", buffering=0)
        try:
            self._size = os.fstat(self._out.fileno()).st_size
        except OSError:
            self._out.close()
            raise

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def size(self) -> int:
        """Bytes written to the active file since it was opened or rotated."""
        return self._size

    @property
    def stats(self) -> RotatorStats:
        return self._stats

    @property
    def compressor(self) -> BackgroundCompressor:
        return self._compressor

    def run(self):
        """Copy lines from the input until it ends, rotating as needed.

        Errors from rotation are fatal and propagate to the caller.
        """
        for line in read_lines(self._in):
            if self._size >= self._threshold:
                self.rotate()

            data = line + b"\n"
            n = self._out.write(data)
            if n is None:
                n = 0
            self._size += n
            self._stats.record_write(n)

            if self._tee:
                self._write_tee(data)

    def rotate(self) -> str:
        """Retire the active file and open a new one. Returns the retired path."""
        num = next_rotation_index(self._filename)

        self._out.close()
        rotated_path = f"{self._filename}.{num}"
        os.rename(self._filename, rotated_path)
        self._out = open(self._filename, "wb", buffering=0)
        self._size = 0

        self._stats.record_rotation()
        logger.info("Rotated: %s", rotated_path)
        self._compressor.submit(rotated_path)
        return rotated_path

    def close(self):
        """Close the active file, then wait for background compressions.

        An error closing the file is raised only after the wait.
        """
        try:
            self._out.close()
        finally:
            self._compressor.wait()

    def _write_tee(self, data: bytes):
        try:
            self._tee_stream.write(data)
            self._tee_stream.flush()
        except (OSError, ValueError) as exc:
            logger.debug("Passthrough write failed: %s", exc)
