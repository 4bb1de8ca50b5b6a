import sys

from loguru import logger

from .config import Settings


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="{time:YYYY-MM-DDTHH:mm:ss} | {level: <7} | {name}:{function} - {message}",
        backtrace=settings.expose_errors,
        diagnose=settings.expose_errors,
    )
