import os, tempfile

os.environ.setdefault("BRIDGE_LOG_DIR", tempfile.mkdtemp(prefix="bridge_admin_logs_"))

import pytest

from bridge_admin.config import Settings
from bridge_admin.store import ConfigStore

HOST_YAML = "title: My Blog\nurl: http://example.com\n"


@pytest.fixture
def site(tmp_path):
    (tmp_path / "_config.yml").write_text(HOST_YAML, encoding="utf-8")
    return tmp_path


@pytest.fixture
def store(site):
    return ConfigStore(str(site), str(site / "_config.yml"))


@pytest.fixture
def settings(site):
    return Settings({"base_dir": str(site), "host_config": "_config.yml",
                     "listen": {"host": "127.0.0.1", "port": 0}})


@pytest.fixture(autouse=True)
def no_proxy(monkeypatch):
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
