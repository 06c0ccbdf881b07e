"""Background compression of retired log segments, one thread per segment."""

import logging
import os
import threading

from logrotate.archive import compress_file
from logrotate.metrics import RotatorStats

logger = logging.getLogger(__name__)


class BackgroundCompressor:
    """Compresses retired files off the ingestion thread.

    Each submitted path gets its own thread. The retired file is removed
    only after its archive is complete; on any failure it stays on disk.
    ``wait()`` blocks until every submitted task has finished.
    """

    def __init__(self, compress_func=None, stats: RotatorStats | None = None):
        self._compress = compress_func or compress_file
        self._stats = stats
        self._lock = threading.Lock()
        self._threads: set[threading.Thread] = set()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._threads)

    def submit(self, path: str) -> threading.Thread:
        """Start compressing *path* in the background."""
        t = threading.Thread(
            target=self._run,
            args=(path,),
            name=f"compress-{os.path.basename(path)}",
        )
        with self._lock:
            self._threads.add(t)
        try:
            t.start()
        except BaseException:
            with self._lock:
                self._threads.discard(t)
            raise
        return t

    def wait(self):
        """Block until all outstanding compressions have finished."""
        while True:
            with self._lock:
                threads = list(self._threads)
            if not threads:
                return
            for t in threads:
                t.join()

    def _run(self, path: str):
        try:
            self._compress_and_remove(path)
        finally:
            with self._lock:
                self._threads.discard(threading.current_thread())

    def _compress_and_remove(self, path: str):
        try:
            gz_path = self._compress(path)
        except Exception:
            logger.exception("Compression of %s failed, leaving it uncompressed", path)
            if self._stats:
                self._stats.record_compression_failure()
            return

        try:
            os.remove(path)
        except OSError as exc:
            logger.error("Archived %s but could not remove it: %s", path, exc)
        else:
            logger.info("Compressed: %s", gz_path)
        if self._stats:
            self._stats.record_archive()
