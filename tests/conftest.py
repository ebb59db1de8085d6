import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

import requests

from hub_client.api import HubAPI
from hub_client.exceptions import EntityNotFound
from hub_client.notifications import (
    ComponentVersionStatus,
    NotificationKind,
    PolicyNotificationContent,
    PolicyRule,
    ProjectVersionRef,
    RawNotification,
)

HUB_URL = "https://hub.example.com"
CREATED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_response(status_code=200, json_data=None, headers=None, text=None):
    """Build a mock requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.headers = headers or {"content-type": "application/json"}
    response.text = text if text is not None else str(json_data)
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def mock_session(mocker):
    """
    Create a mock requests.Session that can be used in place of the real session.
    """
    session = mocker.MagicMock(spec=requests.Session)
    session.proxies = {}
    session.request.return_value = make_response(json_data={})
    return session


@pytest.fixture
def hub_inst(mock_session):
    """
    Create a HubAPI instance with a mock session, already authenticated.
    """
    hub = HubAPI(hub_url=HUB_URL, api_token="testtoken")
    hub.session = mock_session
    hub._authenticated = True
    hub._auth_headers = {"Authorization": "Bearer bearer-token"}
    return hub


@pytest.fixture
def mock_hub(mocker):
    """A fully mocked HubAPI for code that only consumes the client."""
    return mocker.MagicMock(spec=HubAPI)


class FakeResolver:
    """
    In-memory stand-in for EntityResolver.

    Records every call so tests can assert which entities were (not) fetched.
    """

    def __init__(self, versions=None, rules=None, component_versions=None, failures=None):
        self.versions = versions or {}
        self.rules = rules or {}
        self.component_versions = component_versions or {}
        self.failures = failures or {}
        self.calls = []

    def _maybe_fail(self, key):
        if key in self.failures:
            raise self.failures[key]

    def resolve_project_version(self, link, project_name=None):
        self.calls.append(("project_version", link))
        self._maybe_fail(link)
        if link not in self.versions:
            raise EntityNotFound(f"Project version not found: {link}", code="not_found")
        return ProjectVersionRef(project_name=project_name, version_name=self.versions[link], version_link=link)

    def resolve_policy_rule(self, rule_id):
        self.calls.append(("policy_rule", rule_id))
        self._maybe_fail(rule_id)
        if rule_id not in self.rules:
            raise EntityNotFound(f"Policy rule not found: {rule_id}", code="not_found")
        return PolicyRule(id=rule_id, name=self.rules[rule_id])

    def resolve_component_version(self, link):
        self.calls.append(("component_version", link))
        self._maybe_fail(link)
        if link not in self.component_versions:
            raise EntityNotFound(f"Component version not found: {link}", code="not_found")
        return self.component_versions[link]

    def fetched(self, kind):
        return [ref for call_kind, ref in self.calls if call_kind == kind]


@pytest.fixture
def fake_resolver():
    return FakeResolver(
        versions={"/versions/42": "v1.2.0"},
        rules={"R1": "High Severity", "R2": "No GPL", "R3": "Banned License"},
    )


def make_policy_notification(kind=NotificationKind.RULE_VIOLATION, rows=None,
                             project_name="Acme", version_link="/versions/42"):
    return RawNotification(
        created_at=CREATED_AT,
        kind=kind,
        content=PolicyNotificationContent(
            project_name=project_name,
            project_version_link=version_link,
            component_version_statuses=tuple(rows or ()),
        ),
        href=f"{HUB_URL}/api/notifications/1",
    )


def make_row(component, version, rules=(), component_id=None, version_id=None, overridden_by=None):
    return ComponentVersionStatus(
        component_name=component,
        component_version_name=version,
        component_id=component_id or f"{component}-id",
        component_version_id=version_id or f"{component}-{version}-id",
        policy_rule_ids=tuple(rules),
        overridden_by=overridden_by,
    )


@pytest.fixture
def resolver_factory():
    return FakeResolver


@pytest.fixture
def build_notification():
    return make_policy_notification


@pytest.fixture
def build_row():
    return make_row


@pytest.fixture
def build_response():
    return make_response
