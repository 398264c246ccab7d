import os
import json
import logging
from logging.handlers import RotatingFileHandler

from lwserver.common.logging import init_logger
from lwserver.common.logging.config import DEFAULT_CONFIG, get_final_config, merge_dict
from lwserver.common.logging.formatter import ColorFormatter, JsonFormatter
from lwserver.common.logging.handlers import build_handlers, resolve_level


def _record(msg="hello", level=logging.WARNING, **extra):
    record = logging.LogRecord("tests", level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_defaults_without_file_or_env(tmp_path, monkeypatch):
    for key in list(os.environ):
        if key.startswith("LWSERVER_LOG_"):
            monkeypatch.delenv(key)
    config = get_final_config(str(tmp_path / "absent.yaml"))
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    assert config["file"]["enable"] is False


def test_file_then_env_override(tmp_path, monkeypatch):
    path = tmp_path / "logging_config.yaml"
    path.write_text("log_level: WARNING\nconsole:\n  color: false\n  level: WARNING\n")
    monkeypatch.setenv("LWSERVER_LOG_CONSOLE_LEVEL", "ERROR")
    monkeypatch.setenv("LWSERVER_LOG_FILE_BACKUPCOUNT", "3")

    config = get_final_config(str(path))
    assert config["log_level"] == "WARNING"
    assert config["console"] == {"enable": True, "level": "ERROR", "color": False}
    assert config["file"]["backupCount"] == 3
    assert DEFAULT_CONFIG["console"]["level"] == "INFO"


def test_merge_dict_nested():
    merged = merge_dict({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"b": 5}, "e": 2})
    assert merged == {"a": {"b": 5, "c": 2}, "d": 1, "e": 2}


def test_init_logger_from_config_path(tmp_path, monkeypatch):
    path = tmp_path / "logging.yaml"
    log_dir = tmp_path / "logs"
    path.write_text(
        "log_level: DEBUG\n"
        f"log_dir: {log_dir}\n"
        "console:\n  enable: false\n"
        "file:\n  enable: true\n  when: ''\n  formatter: json\n"
    )
    monkeypatch.setenv("LWSERVER_LOG_CONFIG_PATH", str(path))

    logger = init_logger("tests/logging")
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1

    logger.info("写入文件")
    for handler in logger.handlers:
        handler.flush()
        handler.close()
    logger.handlers.clear()

    line = (log_dir / "lwserver.log").read_text(encoding="utf-8").strip()
    assert json.loads(line)["message"] == "写入文件"


def test_color_formatter_restores_levelname():
    record = _record()
    output = ColorFormatter(fmt="%(levelname)s %(message)s").format(record)
    assert "\x1b[33m" in output
    assert record.levelname == "WARNING"

    plain = ColorFormatter(fmt="%(levelname)s %(message)s", color=False).format(_record())
    assert plain == "WARNING hello"


def test_json_formatter_includes_error_fields():
    record = _record(error_code="LWSERVER/CLI/110000", trace_id="t-1")
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "WARNING"
    assert data["message"] == "hello"
    assert data["error_code"] == "LWSERVER/CLI/110000"
    assert data["trace_id"] == "t-1"
    assert "category" not in data


def test_resolve_level_accepts_names_and_numbers():
    assert resolve_level("debug", logging.INFO) == logging.DEBUG
    assert resolve_level("WARNING", logging.INFO) == logging.WARNING
    assert resolve_level(logging.ERROR, logging.INFO) == logging.ERROR
    assert resolve_level("verbose", logging.INFO) == logging.INFO
    assert resolve_level(None, logging.DEBUG) == logging.DEBUG


def test_build_handlers_follows_enable_flags(tmp_path):
    config = get_final_config(str(tmp_path / "absent.yaml"))
    config["console"]["level"] = "error"
    handlers = build_handlers(config)
    assert len(handlers) == 1
    assert handlers[0].level == logging.ERROR
    assert isinstance(handlers[0].formatter, ColorFormatter)

    config["console"]["enable"] = False
    config["file"].update({"enable": True, "when": "", "maxBytes": 1024})
    config["log_dir"] = str(tmp_path / "logs")
    handlers = build_handlers(config)
    try:
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert handlers[0].maxBytes == 1024
    finally:
        for handler in handlers:
            handler.close()
