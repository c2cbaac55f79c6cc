"""Issue lookups and deletion.

Issues are addressed by their team-scoped identifier (``ENG-123``). A bare
number is expanded with the configured default team key.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from .errors import LinearAPIError
from .graphql import GraphQLRequester, is_not_found, mutation_success
from .models import OperationResult

ISSUE_IDENTIFIER_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9_]*)-(\d+)$")

ISSUE_DETAILS_QUERY = """
query GetIssueDeleteDetails($id: String!) {
  issue(id: $id) {
    id
    identifier
    title
  }
}
"""

ISSUE_DELETE_MUTATION = """
mutation DeleteIssue($id: String!) {
  issueDelete(id: $id) {
    success
  }
}
"""


@dataclass(frozen=True)
class IssueRef:
    id: str
    identifier: str
    title: str

    @property
    def display(self) -> str:
        return f"{self.identifier}: {self.title}" if self.title else self.identifier


def resolve_issue_identifier(value: str, team_key: str | None = None) -> str | None:
    """Normalise user input to an issue identifier or UUID.

    ``eng-12`` -> ``ENG-12``; ``12`` -> ``<TEAM>-12`` when a team key is
    known (``None`` otherwise); anything else is passed through unchanged.
    """
    value = value.strip()
    if not value:
        return None
    match = ISSUE_IDENTIFIER_PATTERN.match(value)
    if match:
        return f"{match.group(1).upper()}-{match.group(2)}"
    if value.isdigit():
        return f"{team_key.upper()}-{value}" if team_key else None
    return value


def fetch_issue(client: GraphQLRequester, issue_id: str) -> IssueRef | None:
    try:
        data = client.request(ISSUE_DETAILS_QUERY, {"id": issue_id})
    except LinearAPIError as exc:
        if is_not_found(exc):
            return None
        raise
    issue = data.get("issue")
    if not isinstance(issue, dict):
        return None
    return IssueRef(
        id=str(issue.get("id") or issue_id),
        identifier=str(issue.get("identifier") or issue_id),
        title=str(issue.get("title") or ""),
    )


def delete_issue(client: GraphQLRequester, issue_id: str) -> bool:
    data = client.request(ISSUE_DELETE_MUTATION, {"id": issue_id})
    return mutation_success(data, "issueDelete")


def make_delete_operation(
    client: GraphQLRequester, team_key: str | None = None
) -> Callable[[str], OperationResult]:
    def operation(value: str) -> OperationResult:
        resolved = resolve_issue_identifier(value, team_key)
        if resolved is None:
            return OperationResult.failed(value, "Issue not found")
        issue = fetch_issue(client, resolved)
        if issue is None:
            return OperationResult.failed(resolved, "Issue not found")
        if not delete_issue(client, issue.id):
            return OperationResult.failed(
                issue.identifier, "Delete operation failed", name=issue.display
            )
        return OperationResult.ok(issue.identifier, name=issue.display)

    return operation


__all__ = [
    "IssueRef",
    "delete_issue",
    "fetch_issue",
    "make_delete_operation",
    "resolve_issue_identifier",
]
