import logging

import pytest


class ListHandler(logging.Handler):
    """收集日志记录，项目日志器不向root传播，caplog无法捕获"""

    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def capture_logs():
    attached = []

    def attach(name):
        handler = ListHandler()
        logger = logging.getLogger(name)
        logger.addHandler(handler)
        attached.append((logger, handler))
        return handler.records

    yield attach

    for logger, handler in attached:
        logger.removeHandler(handler)


@pytest.fixture
def key_files(tmp_path):
    """生成身份参数用到的占位凭据文件"""
    files = {}
    for name in ("pub.der", "priv.der", "cert.pem", "x509_priv.der"):
        path = tmp_path / name
        path.write_bytes(b"\x30\x00")
        files[name] = path
    truststore = tmp_path / "truststore"
    truststore.mkdir()
    files["truststore"] = truststore
    return files
