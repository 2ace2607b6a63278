"""
读写站点配置 (host) 与 bridge 配置 (_bridge.json)

bridge 配置缺失时从包内模板重新生成；站点配置没有兜底。
写入不做任何校验，内容原样落盘。
"""
import os, json, shutil, tempfile, threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, NamedTuple, Optional, Union
from .logger import get_logger
log = get_logger("bridge_admin.store")

BRIDGE_FILE = "_bridge.json"
TEMPLATE = Path(__file__).with_name(BRIDGE_FILE)

Content = Union[str, bytes]


@dataclass
class ConfigFile:
    path: str
    content: bytes

    def as_payload(self) -> Dict[str, str]:
        return {"fileName": self.path,
                "config": self.content.decode("utf-8", errors="replace")}


class ReadResult(NamedTuple):
    content: Optional[bytes]
    error: Optional[Exception]


def _to_bytes(content: Content) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content)


def _replace(path: str, data: bytes):
    # 先写临时文件再替换，读者只会看到旧内容或完整的新内容
    fd, tmp = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if os.path.isfile(path):
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise


def _read_json(path: str) -> ReadResult:
    # 任何失败 (缺失/权限/非 UTF-8 JSON) 都折叠成同一种结果
    try:
        with open(path, "rb") as f:
            content = f.read()
        json.loads(content.decode("utf-8"))
    except (OSError, ValueError) as e:
        return ReadResult(None, e)
    return ReadResult(content, None)


class ConfigStore:
    def __init__(self, base_dir: str, host_config_path: str, template_path: Path = TEMPLATE):
        self.base_dir = base_dir
        self.host_config_path = host_config_path
        self.bridge_config_path = os.path.join(base_dir, BRIDGE_FILE)
        self.template_path = template_path
        self._locks = {
            self.host_config_path: threading.RLock(),
            self.bridge_config_path: threading.RLock(),
        }
        if not os.path.exists(self.bridge_config_path):
            log.info("bridge 配置不存在，使用默认模板创建：%s", self.bridge_config_path)
            self.reset_bridge_config()

    @classmethod
    def from_settings(cls, settings) -> "ConfigStore":
        return cls(settings.base_dir, settings.host_config)

    def _template(self) -> bytes:
        with open(self.template_path, "rb") as f:
            return f.read()

    def _save(self, path: str, content: Content):
        data = _to_bytes(content)
        with self._locks[path]:
            _replace(path, data)
        log.debug("已写入 %s (%d 字节)", path, len(data))

    def reset_bridge_config(self):
        self._save(self.bridge_config_path, self._template())
        log.info("bridge 配置已重置为默认值")

    def read_host_config(self) -> ConfigFile:
        with open(self.host_config_path, "rb") as f:
            return ConfigFile(self.host_config_path, f.read())

    def write_host_config(self, content: Content):
        self._save(self.host_config_path, content)
        log.info("站点配置已保存：%s", self.host_config_path)

    def read_bridge_config(self) -> ConfigFile:
        with open(self.bridge_config_path, "rb") as f:
            return ConfigFile(self.bridge_config_path, f.read())

    def read_bridge_config_resilient(self) -> bytes:
        """Return the bridge config, or the bundled defaults if it cannot be read.

        Every failure takes the same branch: the file is regenerated from the
        template once and the template bytes are served. The cause is only
        logged, so a persistent permission or disk problem shows up as a
        stream of (sampled) warnings rather than an error to the caller.
        """
        with self._locks[self.bridge_config_path]:
            result = _read_json(self.bridge_config_path)
            if result.error is None:
                return result.content
            log.warning("读取 bridge 配置失败，恢复默认配置：%s", result.error,
                        extra={"path": self.bridge_config_path})
            self.reset_bridge_config()
            return self._template()

    def write_bridge_config(self, content: Content):
        self._save(self.bridge_config_path, content)
        log.info("bridge 配置已保存：%s", self.bridge_config_path)
