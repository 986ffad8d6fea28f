"""Entry point of the action step: install the Warp CLI and run the agent.

Flow:
  1. Read and validate inputs (no side effects before this passes)
  2. Resolve, download (or reuse from the tool cache) and install the CLI
  3. Run ``warp-cli agent run`` with arguments derived from the inputs
  4. Publish stdout as the ``agent_output`` step output
"""

from __future__ import annotations

from warp_agent_action.common.console import add_mask, set_failed, set_output
from warp_agent_action.common.logging import configure_structlog
from warp_agent_action.runner.agent import ActionInputs, build_agent_args
from warp_agent_action.runner.execute import dump_warp_log, run_agent
from warp_agent_action.runner.installer import install_warp


def run(inputs: ActionInputs) -> str:
    """Run the agent for *inputs* and return its captured output."""
    channel = inputs.validate()
    add_mask(inputs.warp_api_key)

    install_warp(channel, inputs.warp_version)

    args = build_agent_args(inputs)
    try:
        output = run_agent(channel.command, args, inputs.warp_api_key)
    except Exception:
        dump_warp_log(channel)
        raise

    set_output("agent_output", output)
    return output


def main() -> None:
    configure_structlog()
    try:
        run(ActionInputs.from_env())
    except Exception as exc:
        set_failed(str(exc))
