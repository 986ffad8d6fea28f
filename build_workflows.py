#!/usr/bin/env python3
"""
Warp Agent Action — Workflow Generator
======================================
Thin entry-point. All logic lives in warp_agent_action.generator.

Usage:
    python3 build_workflows.py            # regenerate every scenario
    python3 build_workflows.py --check    # fail if generated files are stale
"""

from warp_agent_action.generator.cli import main

if __name__ == "__main__":
    main()
