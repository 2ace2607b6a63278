import os, logging, time
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
import coloredlogs
import pytz

LOG_DIR = os.environ.get("BRIDGE_LOG_DIR", "logs")
SAMPLE_SECONDS = 300


class SamplingFilter(logging.Filter):
    """Let a record tagged with a ``path`` through once per sampling window."""

    def __init__(self, window: float = SAMPLE_SECONDS):
        super().__init__()
        self.window = window
        self._last = {}

    def filter(self, record):
        path = getattr(record, "path", None)
        if not path:
            return True
        now = time.time()
        last = self._last.get(path)
        if last is None or now - last > self.window:
            self._last[path] = now
            return True
        return False


def set_timezone(name: str):
    tz = pytz.timezone(name)
    logging.Formatter.converter = lambda *args: datetime.now(tz).timetuple()


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)
    coloredlogs.install(level="INFO", logger=logger,
                        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    os.makedirs(LOG_DIR, exist_ok=True)
    file_handler = TimedRotatingFileHandler(os.path.join(LOG_DIR, "bridge_admin.log"),
                                            when="midnight", backupCount=14, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s %(funcName)s:%(lineno)d | %(message)s"))
    file_handler.addFilter(SamplingFilter())
    logger.addHandler(file_handler)
    return logger


def set_level(level: str):
    """Apply the configured console level to every logger created so far."""
    for name in list(logging.root.manager.loggerDict):
        if not name.startswith("bridge_admin"):
            continue
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if not isinstance(handler, TimedRotatingFileHandler):
                handler.setLevel(getattr(logging, level.upper(), logging.INFO))
