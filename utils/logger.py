# This module contains a custom formatter for logging messages with different log levels.
import logging

class CustomFormatter(logging.Formatter):
    """
    A custom formatter for logging messages with different log levels.

    Attributes:
        grey (str): ANSI escape sequence for grey color.
        yellow (str): ANSI escape sequence for yellow color.
        red (str): ANSI escape sequence for red color.
        bold_red (str): ANSI escape sequence for bold red color.
        reset (str): ANSI escape sequence to reset color.
        fmt (str): The log message format.
        FORMATS (dict): A dictionary mapping log levels to their respective log message formats.

    Usage:
        logger = get_logger(__name__)
        logger.info("Rebuilt 10/10 posts")
    """
    grey = "\x1b[37;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    dark_grey = "\x1b[30;1m"
    reset = "\x1b[0m"
    fmt = '[%(levelname)s] %(asctime)s - %(name)s - %(message)s'

    FORMATS = {
        logging.DEBUG: dark_grey + fmt + reset,
        logging.INFO: grey + fmt + reset,
        logging.WARNING: yellow + fmt + reset,
        logging.ERROR: red + fmt + reset,
        logging.CRITICAL: bold_red + fmt + reset
    }

    def format(self, record):
        """
        Formats the log record based on its log level.

        Args:
            record (logging.LogRecord): The log record to be formatted.

        Returns:
            str: The formatted log message.
        """
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


ROOT_LOGGER_NAME = "moderation"

_root = logging.getLogger(ROOT_LOGGER_NAME)
_root.setLevel(logging.DEBUG)

# create console handler once, child loggers propagate to it
if not _root.handlers:
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG)
    ch.setFormatter(CustomFormatter())
    _root.addHandler(ch)


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger that sits under the application's root logger.

    Args:
        name: Usually the calling module's __name__.

    Returns:
        logging.Logger: The child logger.
    """
    return _root.getChild(name)


def setup_file_logging(path: str, level: int = logging.INFO) -> logging.Handler:
    """
    Attach a plain (uncoloured) file handler to the application's root logger.

    Args:
        path: The log file to append to.
        level: Minimum level written to the file.

    Returns:
        logging.Handler: The handler that was added.
    """
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CustomFormatter.fmt))
    _root.addHandler(handler)
    return handler
