import logging
import sys
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


LOG_DIR = Path(__file__).parent.parent.parent / 'logs'


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""
    def format(self, record):
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the ``pulse`` logger tree.
    Writes human readable logs to stdout and structured JSON logs to file.
    """
    logger = logging.getLogger("pulse")
    logger.setLevel(level.upper())

    # Avoid adding duplicate handlers if configure_logging is called multiple times
    if logger.handlers:
        return logger

    # Console Handler (Human readable)
    console_handler = logging.StreamHandler(sys.stdout)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File Handler (Structured JSON)
    directory = log_dir or LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(directory / 'pulse.json.log')
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    return logger
