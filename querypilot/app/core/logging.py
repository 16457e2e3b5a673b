import os
import sys

from loguru import logger

from querypilot.app.core.settings import settings


def init_logging():
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL, backtrace=False, diagnose=False)
    logger.add(
        os.path.join(settings.LOG_DIR, "querypilot.jsonl"),
        format="{message}",
        serialize=settings.LOG_JSON,
        enqueue=True,
        rotation="10 MB",
        retention="7 days",
        backtrace=False,
        diagnose=False,
        level=settings.LOG_LEVEL,
    )
