from __future__ import annotations

from typing import Any

import pytest

from linearctl.errors import LinearAPIError
from linearctl.issues import (
    delete_issue,
    fetch_issue,
    make_delete_operation,
    resolve_issue_identifier,
)

ISSUE = {"issue": {"id": "uuid-1", "identifier": "ENG-12", "title": "Fix login"}}


@pytest.mark.parametrize(
    ("value", "team", "expected"),
    [
        ("eng-12", None, "ENG-12"),
        ("ENG-12", "OPS", "ENG-12"),
        ("12", "eng", "ENG-12"),
        ("12", None, None),
        ("0f8fad5b-d9cb-469f-a165-70867728950e", None, "0f8fad5b-d9cb-469f-a165-70867728950e"),
        ("   ", None, None),
    ],
)
def test_resolve_issue_identifier(value: str, team: str | None, expected: str | None) -> None:
    assert resolve_issue_identifier(value, team) == expected


def test_fetch_issue_returns_ref(scripted_client: Any) -> None:
    client = scripted_client({"GetIssueDeleteDetails": ISSUE})
    issue = fetch_issue(client, "ENG-12")
    assert issue is not None
    assert issue.id == "uuid-1"
    assert issue.display == "ENG-12: Fix login"
    assert client.calls == [("GetIssueDeleteDetails", {"id": "ENG-12"})]


def test_fetch_issue_not_found_is_none(scripted_client: Any) -> None:
    client = scripted_client({"GetIssueDeleteDetails": LinearAPIError("GraphQL error: Entity not found")})
    assert fetch_issue(client, "ENG-99") is None


def test_fetch_issue_other_errors_propagate(scripted_client: Any) -> None:
    client = scripted_client({"GetIssueDeleteDetails": LinearAPIError("boom", status=500)})
    with pytest.raises(LinearAPIError):
        fetch_issue(client, "ENG-1")


def test_delete_issue_reads_success(scripted_client: Any) -> None:
    client = scripted_client({"DeleteIssue": {"issueDelete": {"success": True}}})
    assert delete_issue(client, "uuid-1") is True
    assert client.calls == [("DeleteIssue", {"id": "uuid-1"})]


def test_delete_operation_success_and_failures(scripted_client: Any) -> None:
    def details(variables: dict[str, Any]) -> dict[str, Any]:
        if variables["id"] == "ENG-12":
            return ISSUE
        return {"issue": None}

    client = scripted_client(
        {"GetIssueDeleteDetails": details, "DeleteIssue": {"issueDelete": {"success": True}}}
    )
    op = make_delete_operation(client, "eng")

    ok = op("12")
    assert ok.success and ok.id == "ENG-12" and ok.name == "ENG-12: Fix login"

    missing = op("ENG-404")
    assert not missing.success and missing.error == "Issue not found"
    assert missing.id == "ENG-404"


def test_delete_operation_bare_number_without_team(scripted_client: Any) -> None:
    client = scripted_client({})
    result = make_delete_operation(client)("42")
    assert not result.success
    assert result.error == "Issue not found"
    assert client.calls == []


def test_delete_operation_mutation_failure(scripted_client: Any) -> None:
    client = scripted_client(
        {"GetIssueDeleteDetails": ISSUE, "DeleteIssue": {"issueDelete": {"success": False}}}
    )
    result = make_delete_operation(client)("ENG-12")
    assert not result.success
    assert result.error == "Delete operation failed"
    assert result.name == "ENG-12: Fix login"
