import logging
import logging.config
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "voice-ledger.log"

# Client libraries that log every request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "openai")
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def colours_enabled(stream=None) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ColourizedFormatter(logging.Formatter):
    """
    Colours the level name and the ``[TAG]`` prefix used by pipeline stages.
    """
    RESET = "\x1b[0m"
    TAG = "\x1b[36m"

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[90m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[31;1m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, colours: bool = True):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.colours = colours

    def format(self, record: logging.LogRecord) -> str:
        if not self.colours:
            return super().format(record)

        levelname, msg = record.levelname, record.msg
        colour = self.LEVEL_COLORS.get(record.levelno)
        if colour:
            record.levelname = f"{colour}{levelname}{self.RESET}"
        if isinstance(msg, str) and msg.startswith("[") and "]" in msg:
            end = msg.index("]") + 1
            record.msg = f"{self.TAG}{msg[:end]}{self.RESET}{msg[end:]}"
        try:
            return super().format(record)
        finally:
            record.levelname, record.msg = levelname, msg


def _file_handler(log_dir: str) -> dict:
    os.makedirs(log_dir, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.path.join(log_dir, LOG_FILE_NAME),
        "maxBytes": 5 * 1024 * 1024,
        "backupCount": 3,
        "formatter": "plain",
        "encoding": "utf-8",
    }


def get_logging_config() -> dict:
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = os.getenv("LOG_DIR")

    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "console",
        },
    }
    if log_dir:
        handlers["file"] = _file_handler(log_dir)
    root_handlers = list(handlers)

    loggers: dict[str, dict] = {"": {"handlers": root_handlers, "level": log_level_name}}
    for name in SERVER_LOGGERS:
        loggers[name] = {"handlers": root_handlers, "level": "INFO", "propagate": False}
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": "voice_ledger.logger.ColourizedFormatter",
                "fmt": LOG_FORMAT,
                "colours": colours_enabled(),
            },
            # Files never get ANSI codes.
            "plain": {"format": LOG_FORMAT},
        },
        "handlers": handlers,
        "loggers": loggers,
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
