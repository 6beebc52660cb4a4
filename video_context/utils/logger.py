import logging
from rich.logging import RichHandler
from video_context.config import settings

# The openai SDK logs every request through httpx at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")

def setup_logger(name: str = "video_context") -> logging.Logger:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)]
    )
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return logging.getLogger(name)

logger = setup_logger()
