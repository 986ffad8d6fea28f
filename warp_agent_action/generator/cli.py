"""CLI entrypoint for the workflow generator."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

import structlog

from warp_agent_action.common.constants import (
    CONSUMER_WORKFLOWS_DIR,
    PROJECT_ROOT,
    REUSABLE_WORKFLOWS_DIR,
)
from warp_agent_action.common.errors import ActionError
from warp_agent_action.common.logging import configure_structlog
from warp_agent_action.generator.scenarios import SCENARIOS, ScenarioSpec
from warp_agent_action.generator.transform import (
    load_workflow,
    render_consumer_template,
    render_reusable_workflow,
)

log = structlog.get_logger("build_workflows")


@dataclass
class GeneratedFile:
    path: Path
    content: str

    def is_current(self) -> bool:
        return self.path.is_file() and self.path.read_text(encoding="utf-8") == self.content

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.content, encoding="utf-8")


def render_scenario(scenario: ScenarioSpec, root: Path) -> list[GeneratedFile]:
    """Render both outputs of *scenario* without touching the filesystem."""
    example_path = root / scenario.example_file
    try:
        raw_text = example_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ActionError(f"Cannot read example workflow {scenario.example_file}: {exc}") from exc

    document = load_workflow(raw_text, scenario.example_file)
    filename = f"{scenario.scenario_id}.yml"
    return [
        GeneratedFile(
            root / REUSABLE_WORKFLOWS_DIR / filename,
            render_reusable_workflow(scenario, document),
        ),
        GeneratedFile(
            root / CONSUMER_WORKFLOWS_DIR / filename,
            render_consumer_template(scenario, document, raw_text),
        ),
    ]


def generate_scenario(scenario: ScenarioSpec, root: Path) -> list[Path]:
    """Write the outputs of *scenario*. Nothing is written if rendering fails."""
    files = render_scenario(scenario, root)
    for generated in files:
        generated.write()
        log.info("workflow_written", scenario=scenario.scenario_id, path=str(generated.path))
    return [generated.path for generated in files]


def stale_files(scenarios: list[ScenarioSpec], root: Path) -> list[Path]:
    return [
        generated.path
        for scenario in scenarios
        for generated in render_scenario(scenario, root)
        if not generated.is_current()
    ]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Generate reusable workflows and consumer templates from examples/.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=PROJECT_ROOT,
        help="Repository root holding examples/ (default: this checkout)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        default=False,
        help="Exit non-zero if any generated workflow is out of date; write nothing",
    )
    args = parser.parse_args(argv)

    configure_structlog()

    try:
        if args.check:
            stale = stale_files(SCENARIOS, args.root)
            for path in stale:
                print(f"[build-workflows] Out of date: {path}", file=sys.stderr)
            if stale:
                sys.exit(1)
            return
        for scenario in SCENARIOS:
            generate_scenario(scenario, args.root)
    except Exception as exc:
        print(f"[build-workflows] Failed: {exc}", file=sys.stderr)
        sys.exit(1)
