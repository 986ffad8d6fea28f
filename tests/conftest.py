"""
Shared pytest fixtures.

Every test starts from a runner-like environment with no action inputs set,
and with structlog writing straight to the (captured) stdout.
"""

import logging

import pytest
import structlog

_RUNNER_ENV = (
    "GITHUB_OUTPUT",
    "RUNNER_DEBUG",
    "RUNNER_TEMP",
    "RUNNER_TOOL_CACHE",
    "XDG_STATE_DIR",
)


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch):
    """Remove INPUT_* and runner variables inherited from the host."""
    import os

    for key in list(os.environ):
        if key.startswith("INPUT_"):
            monkeypatch.delenv(key, raising=False)
    for key in _RUNNER_ENV:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def uncached_structlog(monkeypatch):
    """Uncached structlog config, so each test's capsys sees the log lines."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    monkeypatch.setattr("warp_agent_action.runner.cli.configure_structlog", lambda: None)
    monkeypatch.setattr("warp_agent_action.generator.cli.configure_structlog", lambda: None)
    yield
    structlog.reset_defaults()


@pytest.fixture
def set_inputs(monkeypatch):
    """Set action inputs the way the runner passes them."""

    def _set(**inputs):
        for name, value in inputs.items():
            monkeypatch.setenv(f"INPUT_{name.upper()}", value)

    return _set


@pytest.fixture
def github_output(tmp_path, monkeypatch):
    path = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))
    return path
