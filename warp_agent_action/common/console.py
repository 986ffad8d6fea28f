"""ANSI colour codes and GitHub Actions workflow-command helpers."""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path


class C:
    """ANSI colour codes (no-op if not a tty)."""

    _tty = sys.stdout.isatty()
    GREEN = "\033[0;32m" if _tty else ""
    CYAN = "\033[0;36m" if _tty else ""
    NC = "\033[0m" if _tty else ""


def info(msg: str) -> None:
    print(f"{C.CYAN}[INFO]{C.NC}  {msg}", flush=True)


def ok(msg: str) -> None:
    print(f"{C.GREEN}[ OK ]{C.NC} {msg}", flush=True)


def warn(msg: str) -> None:
    """Emit a runner warning annotation."""
    print(f"::warning::{_escape_data(msg)}", flush=True)


def debug(msg: str) -> None:
    """Only shown by the runner when step debug logging is enabled."""
    print(f"::debug::{_escape_data(msg)}", flush=True)


def add_mask(secret: str) -> None:
    """Register *secret* so the runner redacts it from all later output."""
    if secret:
        print(f"::add-mask::{_escape_data(secret)}", flush=True)


def set_failed(msg: str) -> None:
    print(f"::error::{_escape_data(msg)}", flush=True)
    sys.exit(1)


def is_debug() -> bool:
    return os.environ.get("RUNNER_DEBUG") == "1"


@contextmanager
def group(title: str) -> Iterator[None]:
    """Fold everything printed inside the block under *title*."""
    print(f"::group::{title}", flush=True)
    try:
        yield
    finally:
        print("::endgroup::", flush=True)


# ── Step inputs / outputs ────────────────────────────────────────────────────


def get_input(name: str, default: str = "") -> str:
    """Read an action input the way the runner exposes it (``INPUT_<NAME>``)."""
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return os.environ.get(key, default).strip() or default


def get_multiline_input(name: str) -> list[str]:
    return [line.strip() for line in get_input(name).splitlines() if line.strip()]


def set_output(name: str, value: str) -> None:
    """Append a (possibly multiline) step output to ``$GITHUB_OUTPUT``."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        # Outside a runner, or an old runner without file commands.
        print(f"::set-output name={name}::{_escape_data(value)}", flush=True)
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ValueError(f"Unexpected delimiter collision for output {name}")

    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
