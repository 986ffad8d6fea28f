#!/usr/bin/env python3
"""
Warp Agent Action — Agent Runner
================================
Thin entry-point invoked by action.yml. All logic lives in
warp_agent_action.runner.cli.

Inputs are read from the INPUT_* environment variables set by the runner;
the captured agent stdout is published as the ``agent_output`` step output.
"""

from warp_agent_action.runner.cli import main

if __name__ == "__main__":
    main()
