"""Make ``import fileman`` and ``import tests.support`` resolve to this checkout.

Running the ``pytest`` script directly does not always put the repository
root on ``sys.path``; test modules import both the package and the shared
helpers in ``tests/support.py`` from there.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = str(Path(__file__).resolve().parents[1])

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
