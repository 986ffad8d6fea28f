"""Lightweight HTTP helpers (stdlib only)."""

from __future__ import annotations

import shutil
from pathlib import Path
from urllib.error import HTTPError
from urllib.request import HTTPRedirectHandler, Request, build_opener, urlopen

from warp_agent_action.common.constants import USER_AGENT


class _NoRedirect(HTTPRedirectHandler):
    """Surface 3xx responses to the caller instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        return None


def get_redirect(url: str, timeout: int = 15) -> tuple[int, str | None]:
    """GET *url* without following redirects.

    Returns ``(status, location)``; *location* is ``None`` when the response
    carries no ``Location`` header.
    """
    opener = build_opener(_NoRedirect)
    req = Request(url, method="GET", headers={"User-Agent": USER_AGENT})
    try:
        with opener.open(req, timeout=timeout) as resp:
            return resp.status, resp.headers.get("Location")
    except HTTPError as exc:
        # With redirects disabled, 3xx responses arrive here too.
        return exc.code, exc.headers.get("Location")


def download_file(url: str, dest: Path, timeout: int = 60) -> Path:
    """Stream *url* into *dest* and return *dest*."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    req = Request(url, method="GET", headers={"User-Agent": USER_AGENT})
    with urlopen(req, timeout=timeout) as resp, open(dest, "wb") as fh:
        shutil.copyfileobj(resp, fh)
    return dest
