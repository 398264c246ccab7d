import logging
import json

# LogErrorHandler通过extra附带的字段
ERROR_FIELDS = ("error_code", "trace_id", "category")


class ColorFormatter(logging.Formatter):
    """控制日志打印色彩的Formatter"""
    color_map = {
        logging.DEBUG: "\x1b[37m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[1;31m"
    }
    reset = "\x1b[0m"

    def __init__(self, fmt=None, datefmt='%Y-%m-%d %H:%M:%S', color=True):
        super().__init__(fmt, datefmt)
        self.color = color

    def format(self, record):
        # 保存原始levelname，避免污染其他formatter
        original_levelname = record.levelname
        try:
            if self.color and record.levelno in self.color_map:
                record.levelname = f"{self.color_map[record.levelno]}{record.levelname}{self.reset}"
            return super().format(record)
        finally:
            record.levelname = original_levelname


class JsonFormatter(logging.Formatter):
    """控制日志的json转储格式的Formatter"""

    def format(self, record):
        levelname = logging.getLevelName(record.levelno)

        d = {
            "timestamp": self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            "level": levelname,
            "module": record.module,
            "line": record.lineno,
            "message": record.getMessage(),
            "logger": record.name
        }
        for key in ERROR_FIELDS:
            if hasattr(record, key):
                d[key] = getattr(record, key)
        if record.exc_info:
            d["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(d, ensure_ascii=False)
