"""Pytest configuration for hypr-minimizer tests."""

import sys
from pathlib import Path

# Make the hypr_minimizer package and the tests.* helpers importable
# BEFORE test collection, with or without an editable install
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


def pytest_configure(config):
    """Configure pytest before test collection."""
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
