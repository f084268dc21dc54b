# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes owned by relbuild itself.

A failing build step propagates its own status (the tool's exit code, or 1
for navigation and removal failures, 126/127 for tools that cannot be
started). The codes below cover what happens around the pipeline.
"""

SUCCESS: int = 0
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
INTERRUPTED: int = 130
