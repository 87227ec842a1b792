import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep developer credentials out of the tests."""
    monkeypatch.delenv("A11Y_SCANNER_URL", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
