"""Warp CLI release resolution, package caching, and installation."""

from __future__ import annotations

import os
import platform
import shutil
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, urlparse

import structlog

from warp_agent_action.common.console import debug, group, info, ok
from warp_agent_action.common.constants import (
    ARCHITECTURES,
    DEB_FILENAME,
    DEFAULT_CACHE_DIR,
    DISCOVERY_URL,
    RELEASES_URL,
    TOOL_NAME,
)
from warp_agent_action.common.errors import ConfigurationError, InstallError, ResolutionError
from warp_agent_action.common.http import download_file, get_redirect
from warp_agent_action.runner.agent import Channel

log = structlog.get_logger("installer")

_MACHINE_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


@dataclass(frozen=True)
class Architecture:
    name: str        # "x64" | "arm64"
    arch: str        # used by the discovery endpoint
    deb_arch: str    # used in .deb file names


@dataclass(frozen=True)
class Release:
    channel: Channel
    version: str     # always "v"-prefixed
    url: str

    @property
    def cache_key(self) -> str:
        return cache_key(self.channel, self.version)


# ── Pure helpers ─────────────────────────────────────────────────────────────


def resolve_architecture(system: str | None = None, machine: str | None = None) -> Architecture:
    """Map the host platform onto the two supported architectures."""
    system = system if system is not None else sys.platform
    if not system.startswith("linux"):
        raise ConfigurationError(
            f"Only Linux runners are supported - the current platform is {system}"
        )
    machine = machine if machine is not None else platform.machine()
    name = _MACHINE_ALIASES.get(machine.lower())
    if name is None:
        raise ConfigurationError(f"Unsupported architecture {machine}")
    arch, deb_arch = ARCHITECTURES[name]
    return Architecture(name=name, arch=arch, deb_arch=deb_arch)


def normalize_version(version: str) -> tuple[str, str]:
    """Return ``(tag, deb_version)``, e.g. ``("v1.2.3", "1.2.3")``."""
    if version.startswith("v"):
        return version, version[1:]
    return f"v{version}", version


def cache_key(channel: Channel, version: str) -> str:
    return f"{channel.value}-{version}"


def discovery_url(channel: Channel, arch: Architecture) -> str:
    query = urlencode({"os": "linux", "package": "deb", "arch": arch.arch, "channel": channel.value})
    return f"{DISCOVERY_URL}?{query}"


def release_url(channel: Channel, version: str, arch: Architecture) -> str:
    tag, deb_version = normalize_version(version)
    return (
        f"{RELEASES_URL}/{channel.value}/{tag}/"
        f"warp-cli-{channel.value}_{deb_version}_{arch.deb_arch}.deb"
    )


def version_from_location(location: str) -> str:
    """Extract the version tag from a release URL's second path segment."""
    parts = [p for p in urlparse(location).path.split("/") if p]
    if len(parts) < 2:
        raise ResolutionError(f"Cannot determine version from redirect location {location}")
    return normalize_version(parts[1])[0]


def resolve_release(channel: Channel, version: str, arch: Architecture) -> Release:
    """Turn ``latest`` or an explicit version into a concrete download URL."""
    if version != "latest":
        tag, _ = normalize_version(version)
        return Release(channel=channel, version=tag, url=release_url(channel, tag, arch))

    url = discovery_url(channel, arch)
    try:
        status, location = get_redirect(url)
    except URLError as exc:
        raise ResolutionError(f"Failed to reach {url}: {exc.reason}") from exc
    if status not in (301, 302):
        raise ResolutionError(f"Expected redirect, got status {status}")
    if not location:
        raise ResolutionError("Redirect location header missing")

    tag = version_from_location(location)
    info(f"Latest version on {channel.value} is {tag}")
    return Release(channel=channel, version=tag, url=location)


# ── Tool cache ───────────────────────────────────────────────────────────────


class ArtifactCache:
    """Local store of downloaded packages, one directory per cache key.

    Layout mirrors the runner tool cache::

        <root>/warp-cli/<channel>-<version>/<arch>/warp-cli.deb
        <root>/warp-cli/<channel>-<version>/<arch>.complete
    """

    def __init__(self, root: Path | None = None) -> None:
        if root is None:
            env_root = os.environ.get("RUNNER_TOOL_CACHE")
            root = Path(env_root) if env_root else DEFAULT_CACHE_DIR
        self.root = root

    def _entry_dir(self, key: str, arch: str) -> Path:
        return self.root / TOOL_NAME / key / arch

    def find(self, key: str, arch: str) -> Path | None:
        entry = self._entry_dir(key, arch)
        marker = entry.with_name(f"{arch}.complete")
        package = entry / DEB_FILENAME
        if marker.is_file() and package.is_file():
            return package
        return None

    def store(self, source: Path, key: str, arch: str) -> Path:
        entry = self._entry_dir(key, arch)
        if entry.exists():
            shutil.rmtree(entry)
        entry.mkdir(parents=True)
        package = entry / DEB_FILENAME
        shutil.copy2(source, package)
        entry.with_name(f"{arch}.complete").write_text("")
        return package


def _temp_dir() -> Path:
    runner_temp = os.environ.get("RUNNER_TEMP")
    base = Path(runner_temp) if runner_temp else Path(tempfile.gettempdir())
    base.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix="warp-cli-", dir=base))


def download_warp_deb(
    channel: Channel,
    version: str,
    *,
    cache: ArtifactCache | None = None,
    system: str | None = None,
    machine: str | None = None,
) -> Path:
    """Return the path of a local .deb for *channel*/*version*, downloading on a cache miss."""
    arch = resolve_architecture(system, machine)
    release = resolve_release(channel, version, arch)
    cache = cache or ArtifactCache()

    cached = cache.find(release.cache_key, arch.name)
    if cached is not None:
        debug(f"Using cached .deb package {cached}")
        return cached

    debug(f"Downloading from {release.url}...")
    workdir = _temp_dir()
    try:
        try:
            downloaded = download_file(release.url, workdir / DEB_FILENAME)
        except HTTPError as exc:
            raise ResolutionError(
                f"Download of {release.url} failed with status {exc.code}"
            ) from exc
        except URLError as exc:
            raise ResolutionError(f"Failed to download {release.url}: {exc.reason}") from exc
        return cache.store(downloaded, release.cache_key, arch.name)
    finally:
        shutil.rmtree(workdir, ignore_errors=True)


# ── Installation ─────────────────────────────────────────────────────────────


def _run_checked(cmd: list[str]) -> None:
    log.info("install_step", command=" ".join(cmd))
    result = subprocess.run(cmd)
    if result.returncode != 0:
        raise InstallError(f"`{' '.join(cmd)}` failed with exit code {result.returncode}")


def install_deb(package: Path) -> None:
    """Install *package*, then let apt pull in any missing dependencies."""
    _run_checked(["sudo", "dpkg", "-i", str(package)])
    _run_checked(["sudo", "apt-get", "-f", "-y", "install"])


def install_warp(channel: Channel, version: str, *, cache: ArtifactCache | None = None) -> Path:
    """Download (or reuse) and install the Warp CLI for *channel*/*version*."""
    with group("Installing Warp"):
        package = download_warp_deb(channel, version, cache=cache)
        install_deb(package)
    ok(f"Warp CLI ({channel.value}) installed from {package}")
    return package
