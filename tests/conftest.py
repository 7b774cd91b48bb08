from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logging():
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_wsl_bootstrap_configured", "_wsl_bootstrap_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
