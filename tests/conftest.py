"""Pytest configuration shared by every suite.

What:
  Establish project import paths and apply a canned runtime configuration to
  every test.

Why:
  The CLI tests execute the real ``emailbox`` package. Prepending
  ``emailbox/src`` to ``sys.path`` makes imports resolve to the source tree
  rather than an installed wheel. The autouse fixture keeps the cached
  configuration from leaking between tests.

How:
  Inject the source directory into ``sys.path`` when present and define
  :func:`runtime_config`, which points ``EMAILBOX_CONFIG_PATH`` at
  ``tests/data/config.yaml`` and resets the loader cache around each test.

Interfaces:
  :func:`runtime_config` (pytest fixture).
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "emailbox" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from emailbox.config.loader import reset_runtime_config

CONFIG_PATH = Path(__file__).resolve().parent / "data" / "config.yaml"


@pytest.fixture(autouse=True)
def runtime_config(monkeypatch: pytest.MonkeyPatch):
    """Apply the canned configuration file for every test.

    Args:
      monkeypatch: Pytest helper injected automatically for environment control.
    """

    monkeypatch.setenv("EMAILBOX_CONFIG_PATH", str(CONFIG_PATH))
    reset_runtime_config()
    try:
        yield
    finally:
        reset_runtime_config()
