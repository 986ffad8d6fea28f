"""Agent inputs and command-line construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from warp_agent_action.common.console import get_input, get_multiline_input, is_debug
from warp_agent_action.common.constants import CHANNEL_COMMANDS
from warp_agent_action.common.errors import ConfigurationError


class Channel(str, Enum):
    """Release track of the Warp CLI."""

    STABLE = "stable"
    PREVIEW = "preview"

    @classmethod
    def parse(cls, value: str) -> Channel:
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unsupported channel {value}") from None

    @property
    def command(self) -> str:
        return CHANNEL_COMMANDS[self.value]


@dataclass
class ActionInputs:
    """Inputs of a single agent run, as passed to the action."""

    warp_channel: str = "stable"
    prompt: str = ""
    saved_prompt: str = ""
    warp_api_key: str = ""
    warp_version: str = "latest"
    model: str = ""
    name: str = ""
    mcp: str = ""
    cwd: str = ""
    profile: str = ""          # empty -> run sandboxed
    output_format: str = ""
    share: list[str] = field(default_factory=list)
    debug: bool = False

    @classmethod
    def from_env(cls) -> ActionInputs:
        return cls(
            warp_channel=get_input("warp_channel", "stable"),
            prompt=get_input("prompt"),
            saved_prompt=get_input("saved_prompt"),
            warp_api_key=get_input("warp_api_key"),
            warp_version=get_input("warp_version", "latest"),
            model=get_input("model"),
            name=get_input("name"),
            mcp=get_input("mcp"),
            cwd=get_input("cwd"),
            profile=get_input("profile"),
            output_format=get_input("output_format"),
            share=get_multiline_input("share"),
            debug=is_debug(),
        )

    def validate(self) -> Channel:
        """Check required inputs before any side effect; return the channel."""
        if not self.prompt and not self.saved_prompt:
            raise ConfigurationError("Either `prompt` or `saved_prompt` must be provided")
        if not self.warp_api_key:
            raise ConfigurationError("`warp_api_key` must be provided.")
        return Channel.parse(self.warp_channel)


def build_agent_args(inputs: ActionInputs) -> list[str]:
    """Translate *inputs* into ``warp-cli agent run`` arguments."""
    args = ["agent", "run"]

    for flag, value in (
        ("--prompt", inputs.prompt),
        ("--saved-prompt", inputs.saved_prompt),
        ("--model", inputs.model),
        ("--name", inputs.name),
        ("--mcp", inputs.mcp),
        ("--cwd", inputs.cwd),
    ):
        if value:
            args += [flag, value]

    if inputs.profile:
        args += ["--profile", inputs.profile]
    else:
        args.append("--sandboxed")

    if inputs.output_format:
        args += ["--output-format", inputs.output_format]

    for recipient in inputs.share:
        args += ["--share", recipient]

    # Warp logs go to stderr in debug mode.
    if inputs.debug:
        args.append("--debug")

    return args
