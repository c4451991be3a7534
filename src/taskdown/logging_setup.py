"""Logging configuration for the command line."""

import logging
import sys


class _StderrHandler(logging.StreamHandler):
    """Write to whatever ``sys.stderr`` is at emit time."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


class _ThirdPartyFilter(logging.Filter):
    """Let taskdown records through; other libraries only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskdown" or record.name.startswith("taskdown."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: int = logging.WARNING) -> None:
    """Send log records to stderr at ``level``.

    Call this once, before the first log call. Existing root handlers are
    replaced so repeated CLI invocations in one process do not duplicate
    output.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = _StderrHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(_ThirdPartyFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
