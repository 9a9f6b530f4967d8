"""
Package logger. Records carry a ``task_id`` naming the season a worker
thread is fetching ("-" outside of scheduled tasks).
"""
import logging
import os
import sys
import threading
from contextlib import contextmanager

LOGGER_NAME = "episode_guide"
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(task_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_local = threading.local()


def level_from_env(default: int = logging.INFO) -> int:
    """EPISODE_GUIDE_LOG_LEVEL (or LOG_LEVEL) as a logging level; unknown names fall back to ``default``."""
    name = (os.environ.get("EPISODE_GUIDE_LOG_LEVEL") or os.environ.get("LOG_LEVEL") or "").strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def get_task_id() -> str:
    return getattr(_local, "task_id", "-")


@contextmanager
def task_context(task_id):
    """Tag every record logged by this thread inside the block with ``task_id``."""
    previous = getattr(_local, "task_id", None)
    _local.task_id = str(task_id)
    try:
        yield
    finally:
        if previous is None:
            del _local.task_id
        else:
            _local.task_id = previous


class TaskIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.task_id = get_task_id()
        return True


def setup_logger(name=LOGGER_NAME, level=None, log_file=None):
    logger = logging.getLogger(name)
    logger.setLevel(level_from_env() if level is None else level)

    if not any(isinstance(f, TaskIdFilter) for f in logger.filters):
        logger.addFilter(TaskIdFilter())
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stderr)]

    log_file = log_file or os.environ.get("EPISODE_GUIDE_LOG_FILE")
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def set_verbose(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)


logger = setup_logger()
