import sys

import pytest
from unittest.mock import patch


@pytest.mark.parametrize("redaction", ["true", "false"])
def test_import_graph_smoke(redaction):
    """
    The API, the flow engine and the client import cleanly
    whatever the environment flags are.
    """
    with patch.dict("os.environ", {
        "ENABLE_PII_REDACTION": redaction,
        "REDIS_URL": "redis://localhost:6379/0",  # harmless default
    }):
        for name in ("petspot.main", "petspot.core.controller", "petspot.client.announcement_client"):
            sys.modules.pop(name, None)

        try:
            import petspot.main  # noqa: F401
            import petspot.core.controller  # noqa: F401
            import petspot.client.announcement_client  # noqa: F401
        except ImportError as e:
            pytest.fail(f"Import failed with redaction={redaction}: {e}")


def test_uvicorn_importable():
    """Simulate uvicorn's import-string loading."""
    from petspot.main import app
    assert app is not None
    paths = {route.path for route in app.routes}
    assert "/api/v1/announcements" in paths
    assert "/health" in paths
