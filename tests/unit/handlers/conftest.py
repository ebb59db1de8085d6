# tests/unit/handlers/conftest.py

import argparse
from datetime import datetime, timezone

import pytest


# Fixture for mock params object (parsed arguments)
@pytest.fixture
def mock_params(mocker):
    """Provides a mocked argparse.Namespace for handler tests."""
    params = mocker.MagicMock(spec=argparse.Namespace)
    params.hub_url = "https://hub.example.com"
    params.api_token = "test_token"
    params.log = "INFO"
    params.max_workers = 2
    params.command = 'test-command'

    # Notifications parameters
    params.start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    params.end = datetime(2024, 5, 2, tzinfo=timezone.utc)
    params.user = False
    params.policy_rules = []
    params.skip_failed = False
    params.path_result = None

    # Policy status parameters
    params.project_name = "Acme"
    params.project_version = "v1.2.0"

    return params
