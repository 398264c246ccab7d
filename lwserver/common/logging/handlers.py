import os
import sys
import logging
from typing import Any, Dict, List, Union
from logging.handlers import TimedRotatingFileHandler, RotatingFileHandler

from .formatter import ColorFormatter, JsonFormatter

LOG_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'


def resolve_level(value: Union[str, int, None], default: int) -> int:
    """'debug'、'DEBUG'、10 都可以作为级别，无法识别时使用 default"""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else default


def console_handler(config: Dict[str, Any]) -> logging.Handler:
    # 日志走stderr，stdout留给--help等正常输出
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolve_level(config.get('level'), logging.INFO))
    handler.setFormatter(ColorFormatter(fmt=LOG_FORMAT, color=config.get('color', True)))
    return handler


def _open_log_file(path: str, config: Dict[str, Any]) -> logging.Handler:
    if config.get('when'):
        return TimedRotatingFileHandler(
            path, when=config['when'],
            backupCount=int(config.get('backupCount', 7)), encoding='utf-8')
    max_bytes = int(config.get('maxBytes') or 0)
    if max_bytes > 0:
        return RotatingFileHandler(
            path, maxBytes=max_bytes,
            backupCount=int(config.get('backupCount', 5)), encoding='utf-8')
    return logging.FileHandler(path, encoding='utf-8')


def file_handler(config: Dict[str, Any], log_dir: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    handler = _open_log_file(os.path.join(log_dir, config['filename']), config)
    handler.setLevel(resolve_level(config.get('level'), logging.DEBUG))

    if config.get('formatter', 'plain') == 'json':
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT + ' (%(filename)s:%(lineno)d)'))
    return handler


def build_handlers(config: Dict[str, Any]) -> List[logging.Handler]:
    """按合并后的日志配置创建控制台与文件处理器"""
    handlers = []
    if config['console'].get('enable', True):
        handlers.append(console_handler(config['console']))
    if config['file'].get('enable', False):
        handlers.append(file_handler(config['file'], config.get('log_dir', './logs')))
    return handlers
