"""Logging configuration"""

import logging
from logging.handlers import TimedRotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler

from requestdesk.core.config import Settings

FILE_LOG_FORMAT = "%(asctime)s <%(levelname)s> %(name)s - %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configure application logging with Rich handler and a rotating log file"""

    level = getattr(logging, settings.log_level, logging.INFO)

    console = Console(
        force_terminal=True,
        width=120,
    )

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        tracebacks_width=120,
    )
    rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]"))

    handlers: list[logging.Handler] = [rich_handler]

    log_file = settings.resolved_log_file
    file_error: OSError | None = None
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            # One file per day, older ones pruned after the retention window
            file_handler = TimedRotatingFileHandler(
                log_file,
                when="midnight",
                backupCount=max(settings.log_retention_days, 1),
                encoding="utf-8",
            )
            file_handler.setFormatter(
                logging.Formatter(fmt=FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            handlers.append(file_handler)
        except OSError as e:
            file_error = e

    # force=True: uvicorn configures the root logger first, override it
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%Y-%m-%d %H:%M:%S]",
        handlers=handlers,
        force=True,
    )

    # Reduce uvicorn access log and HTTP client noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    if file_error is not None:
        logger.warning(f"File logging disabled, cannot open {log_file}: {file_error}")
    logger.info(f"Logging: {settings.log_level} | Env: {settings.environment}")
