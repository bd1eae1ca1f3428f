import logging
import sys

# Libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "tornado.access")


def setup_logging(level: str = "INFO"):
    """Global logging setup for the entire application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),  # Convert string to level
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),  # Output to stderr for systemd/journalctl
        ],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
