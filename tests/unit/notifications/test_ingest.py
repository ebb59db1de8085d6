# tests/unit/notifications/test_ingest.py

from datetime import datetime, timezone

import pytest

from hub_client.exceptions import ValidationError
from hub_client.notifications import (
    NotificationKind,
    PolicyNotificationContent,
    UserRef,
    VulnerabilityNotificationContent,
    to_raw_notification,
)
from hub_client.notifications.ingest import parse_hub_date
from hub_client.notifications.models import OpaqueNotificationContent

HUB = "https://hub.example.com/api"
VERSION_LINK = f"{HUB}/projects/p-1/versions/pv-1"
COMPONENT_LINK = f"{HUB}/components/c-1"
COMPONENT_VERSION_LINK = f"{HUB}/components/c-1/versions/cv-1"


def _view(kind, content, **extra):
    view = {
        "type": kind,
        "createdAt": "2024-05-01T12:00:00.000Z",
        "contentType": "application/json",
        "content": content,
        "_meta": {"href": f"{HUB}/notifications/n-1", "links": []},
    }
    view.update(extra)
    return view


# --- parse_hub_date ---
def test_parse_hub_date_utc_suffix():
    assert parse_hub_date("2024-05-01T12:00:00.000Z") == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_parse_hub_date_naive_is_utc():
    assert parse_hub_date("2024-05-01T12:00:00").tzinfo == timezone.utc


@pytest.mark.parametrize("value", [None, "", "yesterday", 42])
def test_parse_hub_date_invalid(value):
    with pytest.raises(ValidationError):
        parse_hub_date(value)


# --- Policy views ---
def test_rule_violation_view():
    raw = to_raw_notification(_view("RULE_VIOLATION", {
        "projectName": "Acme",
        "projectVersion": VERSION_LINK,
        "componentVersionStatuses": [
            {
                "componentName": "libX",
                "componentVersionName": "1.2",
                "component": COMPONENT_LINK,
                "componentVersion": COMPONENT_VERSION_LINK,
                "policies": [f"{HUB}/policy-rules/R1", f"{HUB}/policy-rules/R2"],
            },
            {"componentName": "libY", "componentVersionName": "3.0", "policies": []},
        ],
    }))

    assert raw.kind is NotificationKind.RULE_VIOLATION
    assert raw.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert raw.href == f"{HUB}/notifications/n-1"
    assert raw.notification_state is None
    assert isinstance(raw.content, PolicyNotificationContent)
    assert raw.content.project_name == "Acme"
    assert raw.content.project_version_link == VERSION_LINK
    lib_x, lib_y = raw.content.component_version_statuses
    assert lib_x.component_id == "c-1"
    assert lib_x.component_version_id == "cv-1"
    assert lib_x.policy_rule_ids == (f"{HUB}/policy-rules/R1", f"{HUB}/policy-rules/R2")
    assert lib_y.policy_rule_ids == ()


def test_legacy_keys_and_policy_infos_are_understood():
    raw = to_raw_notification(_view("RULE_VIOLATION_CLEARED", {
        "projectName": "Acme",
        "projectVersionLink": VERSION_LINK,
        "componentVersionStatuses": [{
            "componentName": "libX",
            "componentVersionName": "1.2",
            "componentVersionLink": COMPONENT_VERSION_LINK,
            "policyInfos": [{"policy": f"{HUB}/policy-rules/R1", "policyName": "High Severity"}],
        }],
    }))

    assert raw.content.project_version_link == VERSION_LINK
    row = raw.content.component_version_statuses[0]
    assert row.component_version_link == COMPONENT_VERSION_LINK
    assert row.component_id == "c-1"
    assert row.policy_rule_ids == (f"{HUB}/policy-rules/R1",)


def test_policy_override_view_is_a_single_row():
    raw = to_raw_notification(_view("POLICY_OVERRIDE", {
        "projectName": "Acme",
        "projectVersion": VERSION_LINK,
        "componentName": "libX",
        "componentVersionName": "1.2",
        "componentVersion": COMPONENT_VERSION_LINK,
        "firstName": "Jane",
        "lastName": "Doe",
        "policies": [f"{HUB}/policy-rules/R2"],
    }))

    (row,) = raw.content.component_version_statuses
    assert row.component_name == "libX"
    assert row.overridden_by == UserRef(first_name="Jane", last_name="Doe")
    assert row.policy_rule_ids == (f"{HUB}/policy-rules/R2",)


def test_component_version_statuses_must_be_a_list():
    with pytest.raises(ValidationError):
        to_raw_notification(_view("RULE_VIOLATION", {"componentVersionStatuses": "oops"}))


def test_user_view_keeps_notification_state():
    raw = to_raw_notification(_view("RULE_VIOLATION", {"projectName": "Acme"}, notificationState="NEW"))
    assert raw.notification_state == "NEW"


# --- Vulnerability view ---
def test_vulnerability_view():
    raw = to_raw_notification(_view("VULNERABILITY", {
        "componentName": "commons-io",
        "versionName": "2.4",
        "componentVersion": COMPONENT_VERSION_LINK,
        "newVulnerabilityIds": [{"source": "NVD", "vulnerabilityId": "CVE-2021-29425",
                                 "vulnerability": f"{HUB}/vulnerabilities/CVE-2021-29425"}],
        "updatedVulnerabilityIds": [],
        "deletedVulnerabilityIds": [{"source": "BDSA", "vulnerabilityId": "BDSA-2020-1"}, {"source": "NVD"}],
        "affectedProjectVersions": [
            {"projectName": "Acme", "projectVersionName": "v1.2.0", "projectVersion": VERSION_LINK},
        ],
    }))

    content = raw.content
    assert isinstance(content, VulnerabilityNotificationContent)
    assert (content.component_name, content.component_version_name) == ("commons-io", "2.4")
    assert (content.component_id, content.component_version_id) == ("c-1", "cv-1")
    assert [v.vulnerability_id for v in content.new_vulnerabilities] == ["CVE-2021-29425"]
    assert content.new_vulnerabilities[0].link == f"{HUB}/vulnerabilities/CVE-2021-29425"
    assert [v.vulnerability_id for v in content.deleted_vulnerabilities] == ["BDSA-2020-1"]
    (affected,) = content.affected_project_versions
    assert affected.project_version_name == "v1.2.0"
    assert affected.project_version_link == VERSION_LINK


# --- Other kinds and malformed documents ---
def test_kind_without_transform_keeps_payload():
    raw = to_raw_notification(_view("BOM_EDIT", {"projectVersion": VERSION_LINK}))
    assert raw.kind is NotificationKind.BOM_EDIT
    assert isinstance(raw.content, OpaqueNotificationContent)
    assert raw.content.payload == {"projectVersion": VERSION_LINK}


def test_unknown_type_is_ingested_as_opaque():
    raw = to_raw_notification(_view("COMPONENT_UNMAPPED", {"codeLocation": "scan-1"}))

    assert raw.kind is NotificationKind.UNKNOWN
    assert raw.wire_type == "COMPONENT_UNMAPPED"
    assert isinstance(raw.content, OpaqueNotificationContent)
    assert raw.content.payload == {"codeLocation": "scan-1"}


def test_known_type_keeps_its_wire_type():
    raw = to_raw_notification(_view("BOM_EDIT", {}))
    assert raw.kind is NotificationKind.BOM_EDIT
    assert raw.wire_type == "BOM_EDIT"


def test_non_string_type_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        to_raw_notification(_view(42, {}))
    assert exc_info.value.code == "invalid_notification_type"


@pytest.mark.parametrize("key, value", [
    ("policies", f"{HUB}/policy-rules/R1"),
    ("policies", {"href": f"{HUB}/policy-rules/R1"}),
    ("policyInfos", "R1"),
])
def test_non_list_rule_references_are_rejected(key, value):
    row = {"componentName": "libX", "componentVersionName": "1.2", key: value}
    view = _view("RULE_VIOLATION", {"projectName": "Acme", "projectVersion": VERSION_LINK,
                                    "componentVersionStatuses": [row]})

    with pytest.raises(ValidationError, match=f"Expected a list for '{key}'"):
        to_raw_notification(view)


@pytest.mark.parametrize("view", [
    "not a dict",
    {"createdAt": "2024-05-01T12:00:00Z", "content": {}},
    {"type": "RULE_VIOLATION", "createdAt": "2024-05-01T12:00:00Z", "content": ["x"]},
    {"type": "RULE_VIOLATION", "content": {}},
])
def test_malformed_views_are_rejected(view):
    with pytest.raises(ValidationError):
        to_raw_notification(view)
