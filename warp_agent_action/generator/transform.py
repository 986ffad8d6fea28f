"""Turn example workflows into reusable workflows and consumer templates.

Every builder here works on deep copies, so the parsed example can be reused
for both outputs and is never modified.
"""

from __future__ import annotations

import copy
import re
from typing import Any

import yaml

from warp_agent_action.common.constants import ACTION_REPO, ACTION_USES_PREFIX
from warp_agent_action.common.errors import WorkflowDocumentError
from warp_agent_action.generator.scenarios import InputSpec, ScenarioSpec, SecretSpec

_BOOL_TAG = "tag:yaml.org,2002:bool"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"

# YAML 1.2 core schema. Leading-zero, sexagesimal and underscored numbers stay strings.
_YAML12_SCALARS = (
    (_BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), "tTfF"),
    (
        _INT_TAG,
        re.compile(r"^(?:[-+]?(?:0|[1-9][0-9]*)|0o[0-7]+|0x[0-9a-fA-F]+)$"),
        "-+0123456789",
    ),
    (
        _FLOAT_TAG,
        re.compile(
            r"""^(?:[-+]?(?:\.[0-9]+|[0-9]+\.[0-9]*)(?:[eE][-+]?[0-9]+)?
            |[-+]?[0-9]+[eE][-+]?[0-9]+
            |[-+]?\.(?:inf|Inf|INF)
            |\.(?:nan|NaN|NAN))$""",
            re.X,
        ),
        "-+0123456789.",
    ),
)

# Agent step parameters that a workflow_call input may override.
OVERRIDABLE_AGENT_INPUTS = ("profile", "model", "name", "mcp")

OPTIONAL_INPUTS_COMMENT = "# These inputs are all optional"


def _yaml12_resolvers(resolvers: dict) -> dict:
    """Swap PyYAML's YAML 1.1 bool/int/float resolvers for the YAML 1.2 ones.

    Keeps the ``on:`` key a string and copies values like ``1:30`` or ``0755``
    through unchanged.
    """
    replaced = {tag for tag, _, _ in _YAML12_SCALARS}
    filtered = {
        first: [(tag, regexp) for tag, regexp in entries if tag not in replaced]
        for first, entries in resolvers.items()
    }
    for tag, regexp, first_chars in _YAML12_SCALARS:
        for first in first_chars:
            filtered.setdefault(first, []).append((tag, regexp))
    return filtered


class WorkflowLoader(yaml.SafeLoader):
    pass


class WorkflowDumper(yaml.SafeDumper):
    """Dumps block-indented sequences, the way GitHub workflows are written."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)

    def ignore_aliases(self, data: Any) -> bool:
        return True


WorkflowLoader.yaml_implicit_resolvers = _yaml12_resolvers(yaml.SafeLoader.yaml_implicit_resolvers)
WorkflowDumper.yaml_implicit_resolvers = _yaml12_resolvers(yaml.SafeDumper.yaml_implicit_resolvers)


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    style = "|" if "\n" in value else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style=style)


WorkflowDumper.add_representer(str, _represent_str)


def load_workflow(text: str, source: str) -> dict[str, Any]:
    """Parse a workflow and check that it has at least one job."""
    try:
        document = yaml.load(text, Loader=WorkflowLoader)
    except yaml.YAMLError as exc:
        raise WorkflowDocumentError(f"Example workflow {source} is not valid YAML: {exc}") from exc
    if not isinstance(document, dict):
        raise WorkflowDocumentError(f"Example workflow {source} did not parse into an object")
    jobs = document.get("jobs")
    if not isinstance(jobs, dict) or not jobs:
        raise WorkflowDocumentError(f"Example workflow {source} does not contain any jobs")
    return document


def dump_workflow(document: dict[str, Any]) -> str:
    return yaml.dump(
        document,
        Dumper=WorkflowDumper,
        sort_keys=False,
        width=float("inf"),
        allow_unicode=True,
        default_flow_style=False,
    )


# ── Reusable workflow ────────────────────────────────────────────────────────


def agent_input_expression(name: str) -> str:
    """Prefer the workflow_call input, then the repository variable, then ''."""
    return f"${{{{ inputs.{name} || vars.WARP_AGENT_{name.upper()} || '' }}}}"


def rewrite_agent_steps(job: dict[str, Any], declared_inputs: dict[str, InputSpec]) -> None:
    """Point agent action parameters of *job* at the workflow_call inputs (in place)."""
    overridable = [name for name in OVERRIDABLE_AGENT_INPUTS if name in declared_inputs]
    if not overridable or not isinstance(job, dict):
        return
    steps = job.get("steps")
    if not isinstance(steps, list):
        return

    for step in steps:
        if not isinstance(step, dict):
            continue
        uses = step.get("uses")
        if not isinstance(uses, str) or not uses.startswith(ACTION_USES_PREFIX):
            continue
        if not isinstance(step.get("with"), dict):
            step["with"] = {}
        for name in overridable:
            step["with"][name] = agent_input_expression(name)


def build_workflow_call_inputs(inputs: dict[str, InputSpec]) -> dict[str, Any] | None:
    if not inputs:
        return None
    schema: dict[str, Any] = {}
    for name, spec in inputs.items():
        entry: dict[str, Any] = {
            "description": spec.description or "",
            "required": bool(spec.required),
            "type": "string",
        }
        if spec.default is not None:
            entry["default"] = spec.default
        schema[name] = entry
    return schema


def build_workflow_call_secrets(secrets: dict[str, SecretSpec]) -> dict[str, Any] | None:
    if not secrets:
        return None
    return {
        name: {"description": spec.description or "", "required": bool(spec.required)}
        for name, spec in secrets.items()
    }


def build_reusable_workflow(scenario: ScenarioSpec, document: dict[str, Any]) -> dict[str, Any]:
    jobs = copy.deepcopy(document["jobs"])
    for job in jobs.values():
        rewrite_agent_steps(job, scenario.inputs)

    workflow_call: dict[str, Any] = {}
    inputs = build_workflow_call_inputs(scenario.inputs)
    if inputs:
        workflow_call["inputs"] = inputs
    secrets = build_workflow_call_secrets(scenario.secrets)
    if secrets:
        workflow_call["secrets"] = secrets

    return {
        "name": document.get("name") or scenario.scenario_id,
        "on": {"workflow_call": workflow_call},
        "jobs": jobs,
    }


def render_reusable_workflow(scenario: ScenarioSpec, document: dict[str, Any]) -> str:
    header = (
        f"# NOTE: This file is generated from {scenario.example_file}.\n"
        "# Do not edit this file directly. Instead, edit the example and run:\n"
        "# python build_workflows.py\n\n"
    )
    return header + dump_workflow(build_reusable_workflow(scenario, document))


# ── Consumer template ────────────────────────────────────────────────────────


def extract_leading_comments(text: str) -> str:
    """Return the comment/blank lines that precede the first YAML content line."""
    kept: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            break
        kept.append(line)
    return "\n".join(kept)


def reusable_workflow_ref(scenario: ScenarioSpec) -> str:
    return f"{ACTION_REPO}/.github/workflows/{scenario.scenario_id}.yml@{scenario.pin_version}"


def build_consumer_template(scenario: ScenarioSpec, document: dict[str, Any]) -> dict[str, Any]:
    if scenario.main_job_id not in document["jobs"]:
        raise WorkflowDocumentError(
            f"Example workflow {scenario.example_file} does not contain "
            f"expected main job '{scenario.main_job_id}'"
        )

    jobs = copy.deepcopy(document["jobs"])

    call_job: dict[str, Any] = {"uses": reusable_workflow_ref(scenario)}
    if scenario.inputs:
        call_job["with"] = {name: "" for name in scenario.inputs}
    if scenario.secrets:
        call_job["secrets"] = {name: f"${{{{ secrets.{name} }}}}" for name in scenario.secrets}
    jobs[scenario.main_job_id] = call_job

    return {
        "name": document.get("name") or scenario.scenario_id,
        "on": copy.deepcopy(document.get("on")),
        "jobs": jobs,
    }


def insert_optional_inputs_comment(text: str, main_job_id: str) -> str:
    """Annotate the main job's ``with:`` block, once."""
    if not text or not main_job_id or OPTIONAL_INPUTS_COMMENT in text:
        return text
    pattern = re.compile(
        rf"(^ {{2}}{re.escape(main_job_id)}:\n {{4}}uses:.*\n {{4}}with:\n)",
        re.MULTILINE,
    )
    return pattern.sub(lambda m: f"{m.group(1)}      {OPTIONAL_INPUTS_COMMENT}\n", text, count=1)


def render_consumer_template(scenario: ScenarioSpec, document: dict[str, Any], raw_text: str) -> str:
    header = (
        f"# Template workflow generated from {scenario.example_file}.\n"
        "# Copy this file into .github/workflows/ in your own repository and customize as needed.\n"
        "# Do not edit this file in-place in this repo; instead, edit the source example and run:\n"
        "# python build_workflows.py\n\n"
    )
    leading = extract_leading_comments(raw_text)
    if leading:
        header += leading + "\n"
    body = dump_workflow(build_consumer_template(scenario, document))
    return header + insert_optional_inputs_comment(body, scenario.main_job_id)
