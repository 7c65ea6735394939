"""日志配置"""

import sys
from loguru import logger

from datacollab.core.config import settings


def setup_logger():
    """初始化 loguru：终端 + 滚动文件"""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        ),
    )
    logger.add(
        str(settings.log_file),
        level=settings.log_level.upper(),
        rotation="10 MB",
        retention="7 days",
        encoding="utf-8",
        enqueue=True,
    )
    return logger


log = setup_logger()
