"""Error types surfaced by the runner and the workflow generator."""

from __future__ import annotations


class ActionError(Exception):
    """Base class. The message is shown to the user as-is."""


class ConfigurationError(ActionError):
    """Missing or invalid inputs, or an unsupported platform."""


class ResolutionError(ActionError):
    """The download URL for a Warp release could not be resolved."""


class InstallError(ActionError):
    """Installing the downloaded package failed."""


class AgentRunError(ActionError):
    """The agent process exited non-zero."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"{command} failed with exit code {returncode}")
        self.command = command
        self.returncode = returncode


class WorkflowDocumentError(ActionError):
    """An example workflow cannot be turned into generated workflows."""
