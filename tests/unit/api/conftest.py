"""
Common fixtures for API unit tests.

Provides shared test utilities:
- FastAPI app with configuration pinned to test settings
- TestClient
- Role headers
- override() helper for application service dependencies
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from hvac_crm.api.main import create_app


@pytest.fixture
def app(hvac_config):
    """Fresh FastAPI app; access context reads feature flags from hvac_config."""
    with patch("hvac_crm.api.dependencies.get_config", return_value=hvac_config):
        application = create_app()
        yield application
        application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def override(app):
    """Replace a dependency provider with a MagicMock and return the mock."""

    def factory(provider, mock=None):
        mock = mock or MagicMock()
        app.dependency_overrides[provider] = lambda: mock
        return mock

    return factory


@pytest.fixture
def manager_headers():
    return {"X-Workspace-Id": "ws-1", "X-User-Role": "hvac-manager"}


@pytest.fixture
def technician_headers():
    return {"X-Workspace-Id": "ws-1", "X-User-Role": "hvac-technician"}
