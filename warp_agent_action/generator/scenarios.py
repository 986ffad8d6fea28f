"""Scenario table for the workflow generator.

The example workflows under ``examples/`` stay the single source of truth for
the workflow logic; this module only records how each one is exposed as a
reusable workflow and a consumer template.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from warp_agent_action.common.constants import DEFAULT_PIN_VERSION, EXAMPLES_DIR


@dataclass(frozen=True)
class InputSpec:
    description: str = ""
    required: bool = False
    default: str | None = None       # None -> no default in the schema


@dataclass(frozen=True)
class SecretSpec:
    description: str = ""
    required: bool = True


@dataclass(frozen=True)
class ScenarioSpec:
    """One example workflow and the interface of its generated counterparts."""

    scenario_id: str                 # also the output file stem
    main_job_id: str                 # job replaced by the reusable workflow call
    inputs: dict[str, InputSpec] = field(default_factory=dict)
    secrets: dict[str, SecretSpec] = field(default_factory=dict)
    pin_version: str = DEFAULT_PIN_VERSION
    example_file: str = ""

    def __post_init__(self) -> None:
        if not self.example_file:
            object.__setattr__(self, "example_file", f"{EXAMPLES_DIR}/{self.scenario_id}.yml")


AGENT_INPUTS = {
    "profile": InputSpec(
        description="Optional Warp Agent profile name to use for Warp Agent.",
        default="",
    ),
    "model": InputSpec(
        description="Optional Warp model ID to use for Warp Agent.",
        default="",
    ),
    "name": InputSpec(
        description="Optional name for this agent task.",
        default="",
    ),
    "mcp": InputSpec(
        description=(
            "Optional MCP configuration in JSON format (or a path to an mcp.json file) "
            "to start before executing the agent."
        ),
        default="",
    ),
}

WARP_API_KEY_SECRET = SecretSpec(description="Warp API key used by the Warp Agent.")


def _scenario(scenario_id: str, main_job_id: str, **extra_secrets: SecretSpec) -> ScenarioSpec:
    return ScenarioSpec(
        scenario_id=scenario_id,
        main_job_id=main_job_id,
        inputs=dict(AGENT_INPUTS),
        secrets={"WARP_API_KEY": WARP_API_KEY_SECRET, **extra_secrets},
    )


SCENARIOS: list[ScenarioSpec] = [
    _scenario("respond-to-comment", "respond"),
    _scenario("review-pr", "review_pr"),
    _scenario("auto-fix-issue", "auto_fix"),
    _scenario(
        "daily-issue-summary",
        "summarize_issues",
        SLACK_WEBHOOK_URL=SecretSpec(
            description="Slack webhook URL used to post the daily issue summary.",
        ),
    ),
    _scenario("fix-failing-checks", "fix_failure"),
    _scenario("suggest-review-fixes", "suggest_review_fixes"),
]
