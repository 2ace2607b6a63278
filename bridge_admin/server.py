#!/usr/bin/env python3
"""
提供配置读写接口
  GET  /settings/host/get      POST /settings/host/save
  GET  /settings/bridge/get    POST /settings/bridge/save
  GET  /settings/bridge/json   POST /settings/bridge/reset
"""
import json
from http.server import ThreadingHTTPServer, BaseHTTPRequestHandler
from .config import Settings
from .logger import get_logger, set_level, set_timezone
from .store import ConfigStore
log = get_logger("bridge_admin.server")


class BadRequest(ValueError):
    pass


class Handler(BaseHTTPRequestHandler):
    store: ConfigStore = None
    cors_origin = "*"

    def log_message(self, fmt, *args):
        log.debug("%s - %s", self.address_string(), fmt % args)

    def end_headers(self):
        self.send_header("Access-Control-Allow-Origin", self.cors_origin)
        self.send_header("Access-Control-Allow-Headers", "Content-Type")
        super().end_headers()

    def _send_json(self, status: int, body):
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _read_config(self) -> str:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            raise BadRequest("Content-Length 无效")
        if length < 0:
            raise BadRequest("Content-Length 不能为负数")
        try:
            data = json.loads(self.rfile.read(length) or b"null")
        except ValueError as e:
            raise BadRequest(f"请求体不是合法 JSON: {e}")
        if not isinstance(data, dict) or not isinstance(data.get("config"), str):
            raise BadRequest("请求体缺少字符串字段 config")
        return data["config"]

    def do_OPTIONS(self):
        self.send_response(200)
        self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        self.end_headers()

    def do_GET(self):
        routes = {
            "/settings/host/get": lambda: self.store.read_host_config().as_payload(),
            "/settings/bridge/get": lambda: self.store.read_bridge_config().as_payload(),
            "/settings/bridge/json": lambda: json.loads(self.store.read_bridge_config_resilient()),
        }
        self._dispatch(routes)

    def do_POST(self):
        routes = {
            "/settings/host/save": lambda: self._save(self.store.write_host_config),
            "/settings/bridge/save": lambda: self._save(self.store.write_bridge_config),
            "/settings/bridge/reset": self._reset,
        }
        self._dispatch(routes)

    def _save(self, write):
        write(self._read_config())
        return {"status": "ok"}

    def _reset(self):
        self.store.reset_bridge_config()
        return self.store.read_bridge_config().as_payload()

    def _dispatch(self, routes):
        action = routes.get(self.path.split("?", 1)[0])
        if action is None:
            self.send_error(404)
            return
        try:
            body = action()
        except BadRequest as e:
            log.warning("无效请求 %s: %s", self.path, e)
            self._send_json(400, {"error": str(e)})
            return
        except OSError as e:
            log.error("处理 %s 失败: %s", self.path, e)
            self._send_json(500, {"error": str(e)})
            return
        self._send_json(200, body)


def make_server(settings: Settings, store: ConfigStore = None) -> ThreadingHTTPServer:
    store = store or ConfigStore.from_settings(settings)
    handler = type("BoundHandler", (Handler,), {"store": store,
                                                 "cors_origin": settings.cors_origin})
    return ThreadingHTTPServer((settings.listen_host, settings.listen_port), handler)


def main():
    settings = Settings.load()
    set_level(settings.log_level)
    if settings.timezone:
        set_timezone(settings.timezone)
    settings.validate()
    server = make_server(settings)
    host, port = server.server_address[:2]
    log.info("配置服务已启动：http://%s:%s", host, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("收到退出信号，正在关闭...")
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
