"""Shared fixtures."""

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("DATABASE_URL", "BIZLEDGER_DATABASE_URL", "BIZLEDGER_LOG_LEVEL", "BIZLEDGER_CURRENCY"):
        monkeypatch.delenv(var, raising=False)
