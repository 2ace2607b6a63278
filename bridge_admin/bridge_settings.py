import json
from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict


@dataclass
class BridgeSettings:
    editorFontSize: int = 14
    editorDarkMode: bool = False
    post_list_itemsPerPage: int = 7
    post_list_showCategories: bool = True
    post_list_showTags: bool = True
    page_list_itemsPerPage: int = 7
    # 新建内容后等待站点数据库更新的时间 (毫秒)
    content_fetch_timeout: int = 200
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def known_keys(cls):
        return [f.name for f in fields(cls) if f.name != "extra"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeSettings":
        keys = cls.known_keys()
        known = {k: v for k, v in data.items() if k in keys}
        extra = {k: v for k, v in data.items() if k not in keys}
        return cls(**known, extra=extra)

    @classmethod
    def from_json(cls, text) -> "BridgeSettings":
        data = json.loads(text) or {}
        if not isinstance(data, dict):
            raise ValueError("bridge 配置必须是 JSON 对象")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra")
        return {**extra, **data}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)
