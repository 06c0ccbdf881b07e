"""Thread-safe counters for the ingestion loop and background compressions."""

import threading
import time


class RotatorStats:
    """Tracks lines, bytes, rotations and compression outcomes."""

    def __init__(self):
        self._lock = threading.Lock()
        self._lines_written = 0
        self._bytes_written = 0
        self._rotations = 0
        self._archives_created = 0
        self._compression_failures = 0
        self._start_time = time.monotonic()

    def record_write(self, nbytes: int):
        with self._lock:
            self._lines_written += 1
            self._bytes_written += nbytes

    def record_rotation(self):
        with self._lock:
            self._rotations += 1

    def record_archive(self):
        with self._lock:
            self._archives_created += 1

    def record_compression_failure(self):
        with self._lock:
            self._compression_failures += 1

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "lines_written": self._lines_written,
                "bytes_written": self._bytes_written,
                "rotations": self._rotations,
                "archives_created": self._archives_created,
                "compression_failures": self._compression_failures,
                "uptime_seconds": round(time.monotonic() - self._start_time, 2),
            }
