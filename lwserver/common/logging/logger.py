import os
import logging
from typing import Optional

from .config import get_final_config
from .handlers import build_handlers, resolve_level

CONFIG_PATH_ENV = 'LWSERVER_LOG_CONFIG_PATH'


def init_logger(name: Optional[str] = None) -> logging.Logger:
    """
    获取并配置指定名称的日志器

    配置来源依次为内置默认值、YAML文件(路径取自 LWSERVER_LOG_CONFIG_PATH)
    和 LWSERVER_LOG_* 环境变量。重复调用会替换已有处理器，不会重复输出
    """
    config_path = os.getenv(CONFIG_PATH_ENV)
    config = get_final_config(config_path) if config_path else get_final_config()

    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(config.get('log_level'), logging.INFO))
    logger.handlers.clear()
    for handler in build_handlers(config):
        logger.addHandler(handler)

    logger.propagate = False
    return logger
