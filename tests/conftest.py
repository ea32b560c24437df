from unittest.mock import patch

import pytest

from app.config import settings


@pytest.fixture(autouse=True)
def offline_settings(tmp_path):
    """Keep every test away from the real Claude API and the real reports directory."""
    with patch.object(settings, "anthropic_api_key", ""), patch.object(
        settings, "reports_path", str(tmp_path / "reports")
    ), patch("app.services.claude_client._client", None):
        yield
