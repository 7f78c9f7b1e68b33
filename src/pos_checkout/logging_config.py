"""Configure application logging using the Python standard library.

Records are rendered as JSON on both the console and a rotating log
file.  Besides timestamp, level, module and message, any dict passed as
``extra={"extra": {...}}`` is merged into the top level of the record.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, UTC


class JsonFormatter(logging.Formatter):
    """Format log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            log_record.update(extra)
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(log_dir: str = "logs", level: int = logging.INFO, console: bool = True) -> None:
    """Configure the root logger with JSON formatting and a rotating file handler.

    Args:
        log_dir: Directory where log files are written.  Created if missing.
        level: Logging level for the root logger.
        console: Also log to stderr.  The interactive CLI turns this off so
            log lines do not interleave with receipts.
    """
    os.makedirs(log_dir, exist_ok=True)
    logger = logging.getLogger()
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    formatter = JsonFormatter()
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, "pos_checkout.log"),
        maxBytes=5 * 1024 * 1024,  # 5 MB per log file
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    logger.addHandler(file_handler)
