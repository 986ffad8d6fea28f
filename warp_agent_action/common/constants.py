"""Shared constants for the Warp agent action."""

from pathlib import Path

# Project root = the action checkout (holds action.yml)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Workflow generator paths, relative to the repository root
EXAMPLES_DIR = "examples"
REUSABLE_WORKFLOWS_DIR = Path(".github") / "workflows"
CONSUMER_WORKFLOWS_DIR = "consumer-workflows"

# Warp CLI distribution
DISCOVERY_URL = "https://app.warp.dev/download/cli"
RELEASES_URL = "https://releases.warp.dev"
USER_AGENT = "warp-cli-action"

# Executable per release channel
CHANNEL_COMMANDS = {
    "stable": "warp-cli",
    "preview": "warp-cli-preview",
}

# Host CPU -> (generic arch token, Debian arch token)
ARCHITECTURES = {
    "x64": ("x86_64", "amd64"),
    "arm64": ("aarch64", "arm64"),
}

# Local tool cache
TOOL_NAME = "warp-cli"
DEB_FILENAME = "warp-cli.deb"
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "warp-agent-action"

# Reusable workflow references
ACTION_REPO = "warpdotdev/warp-agent-action"
ACTION_USES_PREFIX = f"{ACTION_REPO}@"
DEFAULT_PIN_VERSION = "v1"
