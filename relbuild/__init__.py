# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
relbuild — release-build orchestrator for a trunk frontend served by a cargo backend.

The pipeline lives in relbuild.pipeline; relbuild.cli wraps it as a command.
"""

__version__ = "1.0.0"
