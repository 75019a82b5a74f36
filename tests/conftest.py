from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep ``ANYTHING_MD_*`` variables from the host out of AppConfig."""
    for name in list(os.environ):
        if name.startswith("ANYTHING_MD_"):
            monkeypatch.delenv(name)
