from __future__ import annotations

import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

import pytest


class _Handler(BaseHTTPRequestHandler):
    received: list[dict] = []

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        return

    def _send(self, status: int, body: str, headers: dict[str, str] | None = None) -> None:
        body_bytes = body.encode("utf-8")
        try:
            self.send_response(status)
            for k, v in (headers or {"Content-Type": "text/plain; charset=utf-8"}).items():
                self.send_header(k, v)
            self.send_header("Content-Length", str(len(body_bytes)))
            self.end_headers()
            self.wfile.write(body_bytes)
        except (BrokenPipeError, ConnectionResetError):
            return

    def do_GET(self) -> None:  # noqa: N802
        path = urlsplit(self.path).path
        if path == "/redirect":
            self._send(302, "", {"Location": "/ok"})
            return
        if path == "/slow":
            time.sleep(2.0)
            self._send(200, "finally")
            return

        routes: dict[str, tuple[int, str]] = {
            "/ok": (200, "Everything is fine"),
            "/no-content": (204, ""),
            "/not-modified-ish": (399, "odd but below 400"),
            "/unauthorized": (401, "Unauthorized"),
            "/error": (500, "Internal Server Error"),
            "/bad_gateway": (502, "Bad Gateway"),
        }
        status, body = routes.get(path, (404, "Not Found"))
        self._send(status, body)

    def do_POST(self) -> None:  # noqa: N802
        path = urlsplit(self.path).path
        n = int(self.headers.get("Content-Length") or "0")
        raw = self.rfile.read(n) if n > 0 else b"{}"
        if path == "/hook":
            type(self).received.append(json.loads(raw.decode("utf-8")))
            self._send(200, "{}", {"Content-Type": "application/json"})
            return
        if path == "/hook-broken":
            self._send(500, "nope")
            return
        self._send(404, "Not Found")


@pytest.fixture(scope="session")
def local_server_base_url() -> str:
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    httpd.daemon_threads = True
    host, port = httpd.server_address
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()

    try:
        yield f"http://{host}:{port}"
    finally:
        httpd.shutdown()
        thread.join(timeout=5)
        httpd.server_close()


@pytest.fixture()
def webhook_inbox(local_server_base_url: str) -> list[dict]:
    _Handler.received.clear()
    return _Handler.received


@pytest.fixture()
def closed_port_url() -> str:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}/"
