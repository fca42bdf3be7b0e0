"""
Console logging for conda-lockfile.

Besides the standard levels the logger understands STATUS and RESULT (above
INFO, so they show by default) and VERBOSE, VERBOSER and RIDICULOUS (below
INFO, enabled with -v, -vv or --debug). Each one is a method on
LockfileLogger, e.g. ``logger.status("Exporting environment")``.
"""

import enum
import logging

CRITICAL = logging.CRITICAL
FATAL = CRITICAL
ERROR = logging.ERROR
RESULT = 35
WARNING = logging.WARNING   # 30
WARN = WARNING
STATUS = 25
INFO = logging.INFO         # 20
VERBOSE = 19
VERBOSER = 18
DEBUG = logging.DEBUG       # 10
RIDICULOUS = 7
NOTSET = logging.NOTSET

DEFAULT_STREAM_LOG_LEVEL = logging.INFO
TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

custom_levels = {
    'RESULT': RESULT,
    'STATUS': STATUS,
    'VERBOSE': VERBOSE,
    'VERBOSER': VERBOSER,
    'RIDICULOUS': RIDICULOUS,
}


class COLORS(enum.Enum):
    red = "\033[0;31m"
    green = "\033[0;32m"
    yellow = "\033[0;33m"
    blue = "\033[0;34m"
    cyan = "\033[0;36m"
    bred = "\033[1;31m"
    bgreen = "\033[1;32m"
    bblue = "\033[1;34m"
    bipurple = "\033[1;95m"
    normal = "\033[0m"


# Levels missing here print uncolored
level_to_color_map = {
    ERROR: COLORS.bred,
    CRITICAL: COLORS.bred,
    WARNING: COLORS.yellow,
    RESULT: COLORS.green,
    STATUS: COLORS.bblue,
    RIDICULOUS: COLORS.bipurple,
}


def get_level_color(level):
    """ANSI escape for a level number."""
    return level_to_color_map.get(level, COLORS.normal).value


def log_level_factory(level_name):
    """Build the ``logger.<level>()`` method for one of custom_levels."""
    level_num = custom_levels.get(level_name, logging.NOTSET)

    def log_func(self, message, *args, **kwargs):
        if self.isEnabledFor(level_num):
            # one extra frame so records point at the caller, not at log_func
            kwargs.setdefault('stacklevel', 2)
            self._log(level_num, message, args, **kwargs)

    log_func.__name__ = level_name.lower()
    return log_func


class LockfileLogger(logging.Logger):
    """logging.Logger with one method per entry in custom_levels."""


for custom_name, custom_num in custom_levels.items():
    logging.addLevelName(custom_num, custom_name)
    setattr(LockfileLogger, custom_name.lower(), log_level_factory(custom_name))


class ColoredStandardFormatter(logging.Formatter):
    """``<time>|<LEVEL>: <message>`` wrapped in the level's color."""

    def location(self, record):
        return ""

    def format(self, record):
        timestamp = self.formatTime(record, TIME_FORMAT)
        return (f"{get_level_color(record.levelno)}{timestamp}|{record.levelname}{self.location(record)}: "
                f"{record.getMessage()}{COLORS.normal.value}")


class ColoredDebugFormatter(ColoredStandardFormatter):
    """Adds ``:<module>:<line>`` after the level name."""

    def location(self, record):
        return f":{record.module}:{record.lineno}"


def setup_logging(name=__name__, stream_log_level=DEFAULT_STREAM_LOG_LEVEL):
    """
    Create a LockfileLogger writing to stderr.

    The logger itself passes everything from DEBUG up; the stream handler
    filters at stream_log_level, which apply_logging_options() can lower later.
    """
    if isinstance(stream_log_level, str):
        stream_log_level = logging.getLevelName(stream_log_level.upper())

    _logger = LockfileLogger(name)
    _logger.setLevel(logging.DEBUG)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ColoredStandardFormatter())
    stream_handler.setLevel(stream_log_level)
    _logger.addHandler(stream_handler)

    return _logger


def verbosity_to_level(count):
    """Map the number of -v flags to a stream log level."""
    if not count:
        return None
    if count == 1:
        return VERBOSE
    return DEBUG


def apply_logging_options(_logger, args):
    """Apply -v, --debug and --stream-log-level from parsed args to the stream handlers."""
    if args is None:
        return
    stream_handlers = [h for h in _logger.handlers if not hasattr(h, 'baseFilename')]

    level = verbosity_to_level(getattr(args, "verbose", 0))
    if level is not None:
        for stream_handler in stream_handlers:
            if stream_handler.level > level:
                stream_handler.setLevel(level)

    if getattr(args, "debug", False):
        for stream_handler in stream_handlers:
            stream_handler.setFormatter(ColoredDebugFormatter())
            if stream_handler.level > DEBUG:
                stream_handler.setLevel(DEBUG)

    # an explicit level wins over -v and --debug
    if getattr(args, "stream_log_level", None):
        for stream_handler in stream_handlers:
            stream_handler.setLevel(args.stream_log_level.upper())
