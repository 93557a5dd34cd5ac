import logging
import logging.handlers
import sys
from pathlib import Path

from soundboard import config

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'


def setup_logging(level: str = "INFO", logs_dir: Path = config.LOGS_DIR):
    """
    Sets up daily rotating file logging plus console output.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Prevent duplicate handlers if setup_logging is called multiple times
    if logger.handlers:
        return

    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Format: [2026-01-07 20:35:46] [INFO] soundboard.services.voice: Message
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # 'when="D"' means daily, 'interval=1' means every 1 day
    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=logs_dir / "soundboard.log",
        when="D",
        interval=1,
        backupCount=30,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Also log to console
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Keep the gateway chatter down
    logging.getLogger("discord").setLevel(logging.WARNING)

    logging.info("Logging initialized.")
