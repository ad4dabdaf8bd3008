"""Conftest for tests.

Ensure beartype runtime checking is enabled before importing the package.

This module sets TORUSGRID_RUNTIME_TYPECHECKING=1 at import time so every test
runs against the instrumented package and annotation violations surface as
failures.
"""

import os

os.environ.setdefault("TORUSGRID_RUNTIME_TYPECHECKING", "1")
