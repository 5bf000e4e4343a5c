import sys
from loguru import logger

from app.core.config import settings


def setup_logging(level: str | None = None) -> None:
    """Единая настройка loguru: один sink в stderr с уровнем из настроек"""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        backtrace=settings.debug,
        diagnose=settings.debug,
    )
