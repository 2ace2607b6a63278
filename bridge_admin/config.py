import os, yaml
from pathlib import Path
from typing import Dict, Any, Optional
from .logger import get_logger
log = get_logger("bridge_admin.config")

SETTINGS_FILE = os.environ.get("BRIDGE_SETTINGS", "config/settings.yml")
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4000


class Settings:
    """Startup configuration, built once and handed to whoever needs it."""

    def __init__(self, cfg: Dict[str, Any]):
        self.base_dir: str = os.path.abspath(os.path.expanduser(cfg["base_dir"]))
        host_config = os.path.expanduser(cfg.get("host_config") or "_config.yml")
        self.host_config: str = os.path.join(self.base_dir, host_config)

        listen = cfg.get("listen") or {}
        self.listen_host: str = listen.get("host", DEFAULT_HOST)
        self.listen_port: int = int(listen.get("port", DEFAULT_PORT))

        log_cfg = cfg.get("log") or {}
        self.log_level: str = str(log_cfg.get("level", "INFO")).upper()
        self.timezone: Optional[str] = log_cfg.get("timezone")

        self.cors_origin: str = cfg.get("cors_origin", "*")

    @classmethod
    def load(cls, path: str = SETTINGS_FILE) -> "Settings":
        try:
            with open(path, encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except FileNotFoundError:
            log.error("配置文件不存在: %s", path)
            raise
        if "base_dir" not in cfg:
            raise ValueError(f"{path} 缺少 base_dir")
        log.info("已加载配置: %s", path)
        return cls(cfg)

    def validate(self):
        if not Path(self.base_dir).is_dir():
            raise FileNotFoundError(f"base_dir 不是目录: {self.base_dir}")
        if not Path(self.host_config).is_file():
            raise FileNotFoundError(f"站点配置文件不存在: {self.host_config}")
