"""
日志配置模块

为漂移检测等子系统创建独立的日志文件
"""
import os
from functools import wraps

from loguru import logger

from lorekeeper.config.settings import settings

# 各子系统的日志文件
COMPONENT_LOG_FILES = {
    "drift": "drift.log",
    "propagation": "propagation.log",
}

_configured = False


def setup_logging() -> None:
    """为每个子系统添加独立的日志文件（重复调用无副作用）"""
    global _configured

    if _configured:
        return

    os.makedirs(settings.LOG_DIR, exist_ok=True)

    for component, file_name in COMPONENT_LOG_FILES.items():
        logger.add(
            os.path.join(settings.LOG_DIR, file_name),
            rotation="10 MB",  # 日志文件达到 10MB 时轮转
            retention="7 days",  # 保留 7 天
            compression="zip",  # 压缩旧日志
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
            level=settings.LOG_LEVEL,
            filter=lambda record, c=component: record["extra"].get("component") == c
        )

    _configured = True


def component_logger(component: str):
    """
    装饰器：为异步函数添加子系统日志上下文

    用法:
        @component_logger("drift")
        async def check_for_drifts(...):
            pass
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            # 绑定子系统到日志上下文，内部所有日志都会写入对应文件
            with logger.contextualize(component=component):
                logger.debug(f"🚀 Starting {func.__name__}")
                result = await func(*args, **kwargs)
                logger.debug(f"✅ Completed {func.__name__}")
                return result

        return wrapper

    return decorator
