"""
编辑器会话：拉取配置、本地编辑与校验、提交保存

保存失败时保留未保存标记和编辑中的文本。
"""
import httpx
from abc import ABC, abstractmethod
from typing import Optional
from .bridge_settings import BridgeSettings
from .client import BridgeAdminClient
from .logger import get_logger
from .validator import Diagnostic, can_save, diagnostic_for
log = get_logger("bridge_admin.editor")

SAVED = "The config has been saved!"
SAVE_FAILED = "Unable to save the config."


class _Session(ABC):
    def __init__(self, client: BridgeAdminClient):
        self.client = client
        self.file_name: Optional[str] = None
        self.dirty = False
        self.last_message: Optional[str] = None

    @property
    def can_save(self) -> bool:
        return self.dirty

    @abstractmethod
    async def _submit(self, text: str):
        """Send ``text`` to the server; raise ``httpx.HTTPError`` on failure."""

    async def _do_save(self, text: str) -> bool:
        if not self.can_save:
            return False
        try:
            await self._submit(text)
        except httpx.HTTPError as e:
            log.error("保存 %s 失败: %s", self.file_name, e)
            self.last_message = SAVE_FAILED
            return False
        self.dirty = False
        self.last_message = SAVED
        return True


class YamlEditorSession(_Session):
    """Free-text editing of a config, gated on YAML syntax."""

    def __init__(self, client: BridgeAdminClient, kind: str = "host"):
        super().__init__(client)
        if kind not in ("host", "bridge"):
            raise ValueError(f"未知的配置类型: {kind}")
        self.kind = kind
        self.text = ""
        self.diagnostic: Optional[Diagnostic] = None

    async def load(self):
        if self.kind == "host":
            data = await self.client.get_host_config()
        else:
            data = await self.client.get_bridge_config()
        self.file_name = data["fileName"]
        self.text = data["config"]
        self.dirty = False
        self.diagnostic = diagnostic_for(self.text)

    def edit(self, text: str):
        self.text = text
        self.dirty = True
        self.diagnostic = diagnostic_for(text)

    @property
    def can_save(self) -> bool:
        return can_save(self.text, self.dirty)

    async def _submit(self, text: str):
        if self.kind == "host":
            await self.client.save_host_config(text)
        else:
            await self.client.save_bridge_config(text)

    async def save(self) -> bool:
        return await self._do_save(self.text)


class BridgeSettingsForm(_Session):
    """Field-by-field editing of the bridge preferences."""

    def __init__(self, client: BridgeAdminClient):
        super().__init__(client)
        self.file_name = "_bridge.json"
        self.settings = BridgeSettings()

    async def load(self):
        data = await self.client.get_bridge_config()
        if data.get("config"):
            self.settings = BridgeSettings.from_json(data["config"])
            self.file_name = data["fileName"]
        self.dirty = False

    def update(self, **changes):
        unknown = set(changes) - set(BridgeSettings.known_keys())
        if unknown:
            raise KeyError(f"未知字段: {', '.join(sorted(unknown))}")
        for key, value in changes.items():
            setattr(self.settings, key, value)
        self.dirty = True

    async def _submit(self, text: str):
        await self.client.save_bridge_config(text)

    async def save(self) -> bool:
        return await self._do_save(self.settings.to_json())
