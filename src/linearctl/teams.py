"""Team lookups, issue relocation and team deletion.

A team that still owns issues cannot be deleted; its issues are first moved
to another team. The move reuses the bulk executor so it gets the same
concurrency cap, progress line and per-issue failure reporting as the
``--bulk`` commands.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

from .bulk import run_bulk
from .errors import LinearAPIError
from .graphql import GraphQLRequester, is_not_found, mutation_success, paginate
from .models import ExecutionOptions, ExecutionSummary, OperationResult

TEAM_BY_KEY_QUERY = """
query GetTeamIdByKey($key: String!) {
  teams(filter: { key: { eq: $key } }) {
    nodes {
      id
      key
      name
    }
  }
}
"""

TEAM_DETAILS_QUERY = """
query GetTeamDetails($id: String!) {
  team(id: $id) {
    id
    key
    name
  }
}
"""

TEAMS_QUERY = """
query GetTeams($first: Int, $after: String) {
  teams(first: $first, after: $after) {
    nodes {
      id
      key
      name
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

TEAM_ISSUES_QUERY = """
query GetTeamIssues($teamId: String!, $first: Int, $after: String) {
  team(id: $teamId) {
    issues(first: $first, after: $after) {
      nodes {
        id
        identifier
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

MOVE_ISSUE_MUTATION = """
mutation MoveIssueToTeam($id: String!, $teamId: String!) {
  issueUpdate(id: $id, input: { teamId: $teamId }) {
    success
  }
}
"""

TEAM_DELETE_MUTATION = """
mutation DeleteTeam($id: String!) {
  teamDelete(id: $id) {
    success
  }
}
"""


@dataclass(frozen=True)
class Team:
    id: str
    key: str
    name: str

    @property
    def display(self) -> str:
        return f"{self.key}: {self.name}"

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> Team:
        return cls(id=str(node["id"]), key=str(node.get("key") or ""), name=str(node.get("name") or ""))


def resolve_team_id(client: GraphQLRequester, key: str) -> str | None:
    data = client.request(TEAM_BY_KEY_QUERY, {"key": key.strip().upper()})
    nodes = (data.get("teams") or {}).get("nodes") or []
    if nodes and isinstance(nodes[0], dict) and nodes[0].get("id"):
        return str(nodes[0]["id"])
    return None


def fetch_team(client: GraphQLRequester, team_id: str) -> Team | None:
    try:
        data = client.request(TEAM_DETAILS_QUERY, {"id": team_id})
    except LinearAPIError as exc:
        if is_not_found(exc):
            return None
        raise
    node = data.get("team")
    return Team.from_node(node) if isinstance(node, dict) and node.get("id") else None

def list_teams(client: GraphQLRequester) -> list[Team]:
    nodes = paginate(client, TEAMS_QUERY, {}, lambda d: d.get("teams"))
    return [Team.from_node(n) for n in nodes if n.get("id")]


def list_team_issue_ids(client: GraphQLRequester, team_id: str) -> list[tuple[str, str]]:
    """All ``(id, identifier)`` pairs of the team's issues."""
    nodes = paginate(
        client,
        TEAM_ISSUES_QUERY,
        {"teamId": team_id},
        lambda d: (d.get("team") or {}).get("issues"),
    )
    return [(str(n["id"]), str(n.get("identifier") or n["id"])) for n in nodes if n.get("id")]


def make_move_operation(
    client: GraphQLRequester, target_team_id: str
) -> Callable[[str], OperationResult]:
    def operation(issue_id: str) -> OperationResult:
        data = client.request(MOVE_ISSUE_MUTATION, {"id": issue_id, "teamId": target_team_id})
        if not mutation_success(data, "issueUpdate"):
            return OperationResult.failed(issue_id, "Move operation failed")
        return OperationResult.ok(issue_id)

    return operation


def move_issues(
    client: GraphQLRequester,
    issue_ids: list[str],
    target_team_id: str,
    options: ExecutionOptions | None = None,
    *,
    stream: TextIO | None = None,
) -> ExecutionSummary:
    return run_bulk(
        issue_ids,
        make_move_operation(client, target_team_id),
        options,
        stream=stream,
        action="issue_move",
    )


def delete_team(client: GraphQLRequester, team_id: str) -> bool:
    data = client.request(TEAM_DELETE_MUTATION, {"id": team_id})
    return mutation_success(data, "teamDelete")


__all__ = [
    "Team",
    "delete_team",
    "fetch_team",
    "list_team_issue_ids",
    "list_teams",
    "make_move_operation",
    "move_issues",
    "resolve_team_id",
]
