"""Tests for the redirect lookup and file download helpers against a local server."""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.error import HTTPError

import pytest

from warp_agent_action.common.constants import USER_AGENT
from warp_agent_action.common.http import download_file, get_redirect

RELEASE_LOCATION = "https://releases.warp.dev/stable/v1.2.3/warp-cli-stable_1.2.3_amd64.deb"
PACKAGE_BYTES = b"!<arch>\n" + bytes(range(256)) * 64


class _Handler(BaseHTTPRequestHandler):
    seen_user_agents: list = []

    def do_GET(self):  # noqa: N802
        self.seen_user_agents.append(self.headers.get("User-Agent"))
        if self.path == "/redirect":
            self._respond(302, headers={"Location": RELEASE_LOCATION})
        elif self.path == "/moved":
            self._respond(301, headers={"Location": RELEASE_LOCATION})
        elif self.path == "/bare-redirect":
            self._respond(302)
        elif self.path == "/ok":
            self._respond(200, body=b"no redirect here")
        elif self.path == "/package.deb":
            self._respond(200, body=PACKAGE_BYTES)
        else:
            self._respond(404, body=b"not found")

    def _respond(self, status, body=b"", headers=None):
        self.send_response(status)
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):  # noqa: A002
        pass


@pytest.fixture
def server(monkeypatch):
    """Serve _Handler on an ephemeral localhost port for one test."""
    for key in ("http_proxy", "HTTP_PROXY", "https_proxy", "HTTPS_PROXY", "all_proxy", "ALL_PROXY"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("no_proxy", "*")
    monkeypatch.setenv("NO_PROXY", "*")

    _Handler.seen_user_agents = []
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    host, port = httpd.server_address[:2]
    yield f"http://{host}:{port}"
    httpd.shutdown()
    httpd.server_close()
    thread.join(timeout=5)


class TestGetRedirect:
    """Redirects are reported, never followed"""

    def test_found(self, server):
        assert get_redirect(f"{server}/redirect") == (302, RELEASE_LOCATION)

    def test_moved_permanently(self, server):
        assert get_redirect(f"{server}/moved") == (301, RELEASE_LOCATION)

    def test_redirect_without_location(self, server):
        assert get_redirect(f"{server}/bare-redirect") == (302, None)

    def test_plain_success(self, server):
        assert get_redirect(f"{server}/ok") == (200, None)

    def test_error_status_is_returned(self, server):
        assert get_redirect(f"{server}/missing") == (404, None)

    def test_sends_user_agent(self, server):
        get_redirect(f"{server}/redirect")
        assert _Handler.seen_user_agents == [USER_AGENT]


class TestDownloadFile:
    """Streaming a file to disk"""

    def test_writes_served_bytes(self, server, tmp_path):
        dest = tmp_path / "nested" / "warp-cli.deb"

        result = download_file(f"{server}/package.deb", dest)

        assert result == dest
        assert dest.read_bytes() == PACKAGE_BYTES
        assert _Handler.seen_user_agents == [USER_AGENT]

    def test_error_status_raises(self, server, tmp_path):
        with pytest.raises(HTTPError) as exc_info:
            download_file(f"{server}/missing.deb", tmp_path / "warp-cli.deb")
        assert exc_info.value.code == 404
