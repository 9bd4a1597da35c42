"""
Logging Configuration
Loguru sink setup with standard logging interception
"""
import sys
import logging

from loguru import logger

from jobboard.core.config import get_settings

HUMAN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller outside the logging module
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging():
    """Configure Loguru logging"""
    settings = get_settings()

    logger.remove()

    if settings.log_json_format:
        logger.add(
            sys.stdout,
            format="{time} | {level} | {name}:{function}:{line} | {message}",
            level=settings.log_level,
            serialize=True,
        )
    else:
        logger.add(
            sys.stdout,
            format=HUMAN_FORMAT,
            level=settings.log_level,
            colorize=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        logging.getLogger(logger_name).handlers = [InterceptHandler()]

    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={settings.log_level}, json={settings.log_json_format}")
