import pytest
from unittest.mock import MagicMock, patch

HUB_ENV_VARS = (
    "HUB_URL", "HUB_API_TOKEN", "HUB_USERNAME", "HUB_PASSWORD",
    "HUB_PROXY_HOST", "HUB_PROXY_PORT", "HUB_PROXY_USERNAME", "HUB_PROXY_PASSWORD", "HUB_PROXY_IGNORED_HOSTS",
)


@pytest.fixture(autouse=True)
def clean_hub_env(monkeypatch):
    """Keep credentials from the developer's shell out of argument parsing."""
    for name in HUB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_main_dependencies(tmp_path, monkeypatch):
    """Mock all main() function dependencies."""
    # main() writes its log file to the working directory
    monkeypatch.chdir(tmp_path)
    mocks = {}

    with patch("hub_client.main.HubAPI") as mock_hub_cls:
        mocks['hub_api'] = mock_hub_cls
        mocks['hub_instance'] = MagicMock()
        mock_hub_cls.return_value = mocks['hub_instance']

        with patch("hub_client.main.handle_notifications") as mock_notifications, \
             patch("hub_client.main.handle_policy_status") as mock_policy_status:
            mocks['handle_notifications'] = mock_notifications
            mocks['handle_policy_status'] = mock_policy_status
            # COMMAND_HANDLERS holds references taken at import time
            with patch.dict("hub_client.main.COMMAND_HANDLERS", {
                "notifications": mock_notifications,
                "policy-status": mock_policy_status,
            }):
                yield mocks


class ArgBuilder:
    """Builder pattern for constructing test arguments."""

    def __init__(self):
        self.args = ['--hub-url', 'https://hub.example.com', '--api-token', 'testtoken']

    def credentials(self, *extra):
        self.args = ['--hub-url', 'https://hub.example.com', *extra]
        return self

    def option(self, *values):
        self.args.extend(values)
        return self

    def notifications(self, *extra):
        self.args.extend(['notifications', *extra])
        return self

    def policy_status(self, project='Acme', version='1.0.0'):
        self.args.extend(['policy-status', '--project-name', project, '--project-version', version])
        return self

    def build(self):
        return self.args.copy()


@pytest.fixture
def args():
    """Fixture providing the ArgBuilder for constructing test arguments."""
    return ArgBuilder
