#!/usr/bin/env python3
"""
Run All Tests
=============

    python3 polyfan/src/run_tests.py [extra pytest args]

Runs the suite under src/tests in-process; conftest.py handles the path.
"""

import sys
from pathlib import Path

import pytest


def main(argv=None):
    """Run pytest over src/tests and return its exit code."""
    tests = Path(__file__).parent.resolve() / "tests"
    args = [str(tests), "-v", "--tb=short"] + list(argv or [])
    return pytest.main(args)


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
