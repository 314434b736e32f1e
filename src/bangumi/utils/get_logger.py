import logging
import os
from datetime import UTC, datetime
from logging.handlers import TimedRotatingFileHandler

import pytz

"""
Per-module loggers for the Bangumi client.
Console output uses local time; an optional file handler rotates nightly.
"""

TIMEZONE = pytz.timezone(os.getenv("BANGUMI_LOG_TZ", "Asia/Shanghai"))
LOG_DIR = os.getenv("BANGUMI_LOG_DIR", "/tmp/log/bangumi")

Logger_Cache: dict[str, logging.Logger] = {}
Default_Level = logging.INFO


def set_level(level):
    global Default_Level
    Default_Level = level
    for logger in Logger_Cache.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


class LocalTimeFormatter(logging.Formatter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.local_tz = TIMEZONE

    def format(self, record):
        utc_dt = datetime.fromtimestamp(record.created, UTC).replace(tzinfo=pytz.utc)
        local_time = utc_dt.astimezone(self.local_tz)

        record.local_time = local_time.strftime("%H:%M:%S")
        record.short_name = record.name[0:24]
        if record.levelno == logging.WARNING:
            self._style._fmt = "%(local_time)-9s %(short_name)-24s:%(levelname)-8s =====> %(message)s"
        elif record.levelno >= logging.ERROR:
            self._style._fmt = "\n%(local_time)-9s %(short_name)-24s =====> ERROR\n%(message)s\n"
        else:
            self._style._fmt = "%(local_time)-9s %(short_name)-24s:%(levelname)-8s %(message)s"

        return super().format(record)


class LocalFileFormatter(logging.Formatter):
    def format(self, record):
        utc_dt = datetime.fromtimestamp(record.created, UTC).replace(tzinfo=pytz.utc)
        record.utc_time = utc_dt.strftime("%Y-%m-%d %H:%M:%S")
        self._style._fmt = "%(utc_time)s:%(name)s:%(levelname)s %(message)s"
        return super().format(record)


def get_logger(name: str, level=None, filename=None) -> logging.Logger:
    """Return a logger with the specified name."""
    if name in Logger_Cache:
        return Logger_Cache[name]

    if level is None:
        level = Default_Level
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # replace any console handler left over from an earlier configuration
    for handler in list(logger.handlers):
        if isinstance(handler, logging.StreamHandler):
            logger.removeHandler(handler)

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(LocalTimeFormatter())
    logger.addHandler(ch)

    if filename:
        os.makedirs(LOG_DIR, exist_ok=True)
        fullpath = os.path.join(LOG_DIR, os.path.basename(filename))
        try:
            fh: logging.Handler = TimedRotatingFileHandler(fullpath, when="midnight", backupCount=30)
        except FileNotFoundError:
            fh = logging.FileHandler(fullpath)
        fh.setLevel(level)
        fh.setFormatter(LocalFileFormatter())
        logger.addHandler(fh)

    logger.propagate = False

    Logger_Cache[name] = logger

    return logger
