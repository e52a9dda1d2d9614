import logging
import sys
from typing import Union

class CustomFormatter(logging.Formatter):
    """Colors each record by level; plain text when ``use_color`` is off."""
    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    cyan = "\x1b[96;20m"
    reset = "\x1b[0m"
    # Include filename and lineno for better debugging context
    log_format_base = "%(asctime)s - %(levelname)s - %(message)s (%(filename)s:%(lineno)d)"

    LEVEL_COLORS = {
        logging.DEBUG: cyan,
        logging.INFO: grey,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def __init__(self, use_color: bool = True):
        super().__init__(self.log_format_base)
        self._formatters = {
            level: logging.Formatter(color + self.log_format_base + self.reset if use_color else self.log_format_base)
            for level, color in self.LEVEL_COLORS.items()
        }

    def format(self, record):
        formatter = self._formatters.get(record.levelno)
        if formatter is None:
            return super().format(record)
        return formatter.format(record)

def parse_level(level: Union[int, str]) -> int:
    """Accepts a logging level number or name ("debug", "INFO", ...); unknown names mean INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO

def setup_logging(level: Union[int, str] = logging.DEBUG):
    """
    Configures the root logger with a custom colored formatter.
    Colors are only written when stdout is a terminal.
    """
    level = parse_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Drop handlers installed earlier, e.g. by a previous call
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(CustomFormatter(use_color=sys.stdout.isatty()))
    root_logger.addHandler(handler)
