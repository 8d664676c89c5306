"""Pytest configuration and shared fixtures."""

import functools
import ssl
import threading
from http.server import BaseHTTPRequestHandler, SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest
import trustme

TESTS_DIR = Path(__file__).parent
TESTDATA_DIR = TESTS_DIR / "testdata"

PROXY_ENV_VARS = (
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "NO_PROXY",
    "ALL_PROXY",
    "http_proxy",
    "https_proxy",
    "no_proxy",
    "all_proxy",
    "REQUEST_METHOD",
)


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format, *args):
        pass


class FileServer:
    """Serve a directory over HTTP, or HTTPS when given a server SSL context."""

    def __init__(self, directory: Path, ssl_context: ssl.SSLContext | None = None):
        handler = functools.partial(_QuietHandler, directory=str(directory))
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        self._server.daemon_threads = True
        self.scheme = "http"
        if ssl_context is not None:
            self._server.socket = ssl_context.wrap_socket(self._server.socket, server_side=True)
            self.scheme = "https"
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def host(self) -> str:
        host, port = self._server.server_address[:2]
        return f"{host}:{port}"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}"

    def __enter__(self) -> "FileServer":
        self._thread.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture(autouse=True)
def clean_proxy_env(monkeypatch):
    """Keep the developer's proxy settings out of every test."""
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def testdata_file() -> Path:
    return TESTDATA_DIR / "file.yaml"


@pytest.fixture(scope="session")
def ca() -> trustme.CA:
    """Throwaway certificate authority for HTTPS tests."""
    return trustme.CA()


@pytest.fixture
def ca_pem(ca: trustme.CA) -> bytes:
    return ca.cert_pem.bytes()


@pytest.fixture
def https_server(ca: trustme.CA):
    """HTTPS server for tests/testdata, certificate valid for example.com and 127.0.0.1."""
    server_cert = ca.issue_cert("example.com", "127.0.0.1", "localhost")
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    server_cert.configure_cert(context)
    with FileServer(TESTDATA_DIR, context) as server:
        yield server


@pytest.fixture
def http_server():
    """Plain HTTP server for tests/testdata."""
    with FileServer(TESTDATA_DIR) as server:
        yield server


class _RedirectHandler(BaseHTTPRequestHandler):
    target = ""

    def do_GET(self):
        self.send_response(302)
        self.send_header("Location", self.target + self.path)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


class RedirectServer:
    """Plain HTTP server answering every GET with a 302 to target + path."""

    def __init__(self, target: str):
        handler = type("Handler", (_RedirectHandler,), {"target": target.rstrip("/")})
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def __enter__(self) -> "RedirectServer":
        self._thread.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def redirect_server():
    """Factory starting a RedirectServer for a given target."""
    servers = []

    def start(target: str) -> RedirectServer:
        server = RedirectServer(target).__enter__()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.__exit__(None, None, None)
