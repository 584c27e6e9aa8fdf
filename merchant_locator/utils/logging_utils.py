import logging
import re

from colorama import Fore, Style

from ..configuration import LoggingConfig

TRACE_LOGLEVEL = 5
logging.addLevelName(TRACE_LOGLEVEL, "TRACE")

LOGGER_NAME = "merchant-locator"

LEVEL_COLORS = {
    TRACE_LOGLEVEL: Style.DIM,
    logging.DEBUG: Fore.CYAN,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}

REDACTED = "**********"

SECRET_PATTERNS = (
    (re.compile(r"-----BEGIN ([A-Z0-9 ]*)PRIVATE KEY-----.*?(-----END \1PRIVATE KEY-----|$)", re.DOTALL), f"-----{REDACTED} PRIVATE KEY-----"),
    (re.compile(r'(oauth_(?:consumer_key|signature|nonce))="[^"]*"'), rf'\1="{REDACTED}"'),
)


class LevelColorFormatter(logging.Formatter):

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno, Fore.RESET)
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


class SecretRedactingFilter(logging.Filter):
    """
    Masks private key PEM blocks and OAuth credentials in the rendered message.

    Nothing in the package logs them; this covers third-party loggers sharing
    our handlers, such as uvicorn echoing a request.
    """

    def filter(self, record):
        message = record.getMessage()

        redacted = message
        for pattern, replacement in SECRET_PATTERNS:
            redacted = pattern.sub(replacement, redacted)

        if redacted != message:
            record.msg = redacted
            record.args = None

        return True


class MerchantLocatorLogger(logging.Logger):

    def trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE_LOGLEVEL):
            self._log(TRACE_LOGLEVEL, msg, args, **kwargs)


logging.setLoggerClass(MerchantLocatorLogger)

_LEVELS = {
    "trace": TRACE_LOGLEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_FORMAT = {
    'fmt': "{asctime} | {levelname:<5} | {threadName:<14.14} | {message}",
    'style': "{",
    'datefmt': "%Y-%m-%d %H:%M:%S",
}


def init_logger(logging_config: LoggingConfig, name=LOGGER_NAME):
    """
    Route the package logger to the console, and to a plain file when one is
    configured. Calling it again replaces the previous handlers.
    """
    logger = get_logger(name)
    logger.setLevel(_LEVELS[logging_config.level.lower()])

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    redacting_filter = SecretRedactingFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(LevelColorFormatter(**LOG_FORMAT))
    console_handler.addFilter(redacting_filter)
    logger.addHandler(console_handler)

    if logging_config.file:
        file_handler = logging.FileHandler(logging_config.file.path, mode='a')
        file_handler.setFormatter(logging.Formatter(**LOG_FORMAT))
        file_handler.addFilter(redacting_filter)
        logger.addHandler(file_handler)


def get_logger(name=LOGGER_NAME) -> MerchantLocatorLogger:
    logger = logging.getLogger(name)
    logger.propagate = False

    return logger


def attach_uvicorn_to_my_logger(base_logger_name: str = LOGGER_NAME) -> None:
    base = logging.getLogger(base_logger_name)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = list(base.handlers)
        uvicorn_logger.setLevel(base.level)
        uvicorn_logger.propagate = False
