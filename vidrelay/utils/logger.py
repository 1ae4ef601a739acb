import logging
from rich.logging import RichHandler

LOGGER_NAME = "vidrelay"

def setup_logger(level: str = "INFO", name: str = LOGGER_NAME) -> logging.Logger:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)]
    )
    return logging.getLogger(name)

logger = logging.getLogger(LOGGER_NAME)
