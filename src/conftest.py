"""
Pytest Configuration
====================

Puts src/ on sys.path so a plain checkout runs the suite without
`pip install -e .`. An installed polyfan resolves to the same directory.
"""

import sys
from pathlib import Path

SRC_ROOT = Path(__file__).parent.resolve()

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))
