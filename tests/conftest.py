"""
Shared pytest configuration.

Tests marked `slow` solve early-game positions, which takes minutes in pure
Python. They only run with CONNECT4_RUN_SLOW=1.
"""

import os
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: solves early-game positions (set CONNECT4_RUN_SLOW=1)")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("CONNECT4_RUN_SLOW") == "1":
        return
    skip_slow = pytest.mark.skip(reason="set CONNECT4_RUN_SLOW=1 to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
