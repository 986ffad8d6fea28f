"""Run the Warp agent and surface its logs on failure."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import structlog

from warp_agent_action.common.console import group, warn
from warp_agent_action.common.errors import AgentRunError
from warp_agent_action.runner.agent import Channel

log = structlog.get_logger("agent")


def run_agent(command: str, args: list[str], api_key: str) -> str:
    """Execute *command* with *args* and return everything it wrote to stdout.

    Output is echoed line by line while the agent runs. The API key is passed
    through the environment only.
    """
    env = {**os.environ, "WARP_API_KEY": api_key}
    log.info("agent_start", command=command, n_args=len(args))

    captured: list[str] = []
    with subprocess.Popen(
        [command, *args],
        stdout=subprocess.PIPE,
        env=env,
    ) as proc:
        for raw_line in proc.stdout:
            line = raw_line.decode("utf-8", errors="replace")
            sys.stdout.write(line)
            sys.stdout.flush()
            captured.append(line)
        proc.wait()

    if proc.returncode != 0:
        raise AgentRunError(command, proc.returncode)

    log.info("agent_finished", command=command)
    return "".join(captured)


def warp_log_path(channel: Channel) -> Path:
    """Location of the Warp log file for *channel*."""
    state_env = os.environ.get("XDG_STATE_DIR")
    state_dir = Path(state_env) if state_env else Path.home() / ".local" / "state"
    if channel is Channel.STABLE:
        return state_dir / "warp-terminal" / "warp.log"
    return state_dir / f"warp-terminal-{channel.value}" / f"warp_{channel.value}.log"


def dump_warp_log(channel: Channel) -> None:
    """Print the Warp log for troubleshooting. Never raises."""
    path = warp_log_path(channel)
    if not path.is_file():
        warn(f"warp.log not found at {path}")
        return

    with group("Warp Logs"):
        try:
            print(path.read_text(encoding="utf-8", errors="replace"), flush=True)
        except OSError as exc:
            warn(f"Failed to read warp.log: {exc}")
