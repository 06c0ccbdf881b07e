"""logrotate — write stdin to a log file, rotating and gzipping it by size."""

import logging
import signal
import sys
import threading

from logrotate.config import load_config
from logrotate.rotator import Rotator

logger = logging.getLogger("logrotate")


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [logrotate] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def main(argv=None, in_stream=None) -> int:
    try:
        config = load_config(argv)
    except (OSError, ValueError) as exc:
        print(f"logrotate: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    logger.info(
        "Config: filename=%s, threshold=%d kB, tee=%s",
        config.filename, config.threshold_kb, config.tee,
    )

    # SIGTERM takes the same path as Ctrl-C so in-flight compressions finish
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, signal.default_int_handler)

    try:
        rotator = Rotator(
            in_stream if in_stream is not None else sys.stdin.buffer,
            config.filename,
            threshold_kb=config.threshold_kb,
            tee=config.tee,
        )
    except OSError as exc:
        logger.error("Cannot open %s: %s", config.filename, exc)
        return 1

    status = 0
    try:
        rotator.run()
    except KeyboardInterrupt:
        logger.info("Shutdown signal received, stopping...")
    except (OSError, RuntimeError) as exc:
        logger.error("Rotation failed: %s", exc)
        status = 1
    finally:
        pending = rotator.compressor.pending
        if pending:
            logger.info("Waiting for %d compression(s) to finish", pending)
        try:
            rotator.close()
        except OSError as exc:
            logger.error("Closing %s failed: %s", config.filename, exc)
            status = 1

    logger.info("Shut down (status %d). Stats: %s", status, rotator.stats.snapshot())
    return status


if __name__ == "__main__":
    sys.exit(main())
