import gzip
import logging
import logging.handlers
import os
import shutil
import sys
from gzip import GzipFile
from pathlib import Path

from .config import settings

logger = logging.getLogger("porkbun_ddns")
logger.setLevel(settings.log_level.upper())
formatter = logging.Formatter(
    "%(asctime)s %(levelname)s [%(module)s:%(funcName)s:%(lineno)d] %(message)s"
)


def rotator(source, dest):
    with open(source, "rb") as f_in:
        with gzip.open(dest + ".gz", "wb") as f_out:
            assert isinstance(f_out, GzipFile)
            shutil.copyfileobj(f_in, f_out)
    os.remove(source)


if settings.logs_dir is not None:
    logs_dir = Path(settings.logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    log_file_handler = logging.handlers.TimedRotatingFileHandler(
        logs_dir / "porkbun-ddns.log", when="midnight"
    )
    log_file_handler.setFormatter(formatter)
    log_file_handler.rotator = rotator
    logger.addHandler(log_file_handler)

log_stream_handler = logging.StreamHandler(sys.stderr)
log_stream_handler.setFormatter(formatter)
logger.addHandler(log_stream_handler)


def set_silent(silent: bool) -> None:
    """
    Silence successful log messages.

    Errors and warnings are still emitted; INFO and DEBUG lines are dropped.
    Turning silence off restores the configured level.
    """
    if silent:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(settings.log_level.upper())
