import httpx
from typing import Any, Dict, Optional
from .logger import get_logger
log = get_logger("bridge_admin.client")


class BridgeAdminClient:
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = 15):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout,
                                         transport=transport)

    async def _get(self, path: str) -> Any:
        r = await self._client.get(path)
        r.raise_for_status()
        return r.json()

    async def _post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        r = await self._client.post(path, json=json)
        r.raise_for_status()
        return r.json()

    async def get_host_config(self) -> Dict[str, str]:
        return await self._get("/settings/host/get")

    async def save_host_config(self, text: str):
        await self._post("/settings/host/save", {"config": text})

    async def get_bridge_config(self) -> Dict[str, str]:
        return await self._get("/settings/bridge/get")

    async def save_bridge_config(self, text: str):
        await self._post("/settings/bridge/save", {"config": text})

    async def get_preferences(self) -> Dict[str, Any]:
        return await self._get("/settings/bridge/json")

    async def reset_bridge_config(self) -> Dict[str, str]:
        return await self._post("/settings/bridge/reset")

    async def aclose(self):
        await self._client.aclose()
