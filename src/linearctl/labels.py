"""Issue label resolution and deletion.

Label names are only unique per team, so a name can match several labels.
Resolution prefers the requested team's label, then the workspace label; any
remaining ambiguity is handed to a chooser (interactive single mode) or
settled by taking the first match (bulk mode).

``list_labels`` returns a team's labels together with the workspace labels it
inherits, or only workspace labels, sorted by name.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import LinearAPIError
from .graphql import GraphQLRequester, is_uuid, mutation_success, paginate
from .logging import get_logger
from .models import OperationResult

LABEL_BY_ID_QUERY = """
query GetLabelById($id: String!) {
  issueLabel(id: $id) {
    id
    name
    color
    team {
      key
      name
    }
  }
}
"""

LABEL_BY_NAME_QUERY = """
query GetLabelByName($name: String!) {
  issueLabels(filter: { name: { eqIgnoreCase: $name } }) {
    nodes {
      id
      name
      color
      team {
        key
        name
      }
    }
  }
}
"""

LABELS_QUERY = """
query GetIssueLabels($filter: IssueLabelFilter, $first: Int, $after: String) {
  issueLabels(filter: $filter, first: $first, after: $after) {
    nodes {
      id
      name
      description
      color
      team {
        key
        name
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

LABEL_DELETE_MUTATION = """
mutation DeleteIssueLabel($id: String!) {
  issueLabelDelete(id: $id) {
    success
  }
}
"""

LabelChooser = Callable[[str, Sequence["Label"]], "Label | None"]


@dataclass(frozen=True)
class Label:
    id: str
    name: str
    color: str | None = None
    team_key: str | None = None
    team_name: str | None = None
    description: str | None = None

    @property
    def display(self) -> str:
        return f"{self.name} ({self.team_key or 'Workspace'})"

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> Label:
        team = node.get("team") if isinstance(node.get("team"), dict) else None
        return cls(
            id=str(node["id"]),
            name=str(node.get("name") or ""),
            color=node.get("color"),
            team_key=team.get("key") if team else None,
            team_name=team.get("name") if team else None,
            description=node.get("description"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "team": self.team_key,
        }


def _lookup_by_id(client: GraphQLRequester, label_id: str) -> Label | None:
    try:
        data = client.request(LABEL_BY_ID_QUERY, {"id": label_id})
    except LinearAPIError as exc:
        get_logger().debug("label id lookup failed", value=label_id, error=str(exc))
        return None
    node = data.get("issueLabel")
    return Label.from_node(node) if isinstance(node, dict) and node.get("id") else None


def find_labels_by_name(client: GraphQLRequester, name: str) -> list[Label]:
    data = client.request(LABEL_BY_NAME_QUERY, {"name": name})
    nodes = (data.get("issueLabels") or {}).get("nodes") or []
    return [Label.from_node(n) for n in nodes if isinstance(n, dict) and n.get("id")]


def _label_filter(team_key: str | None, workspace_only: bool) -> dict[str, Any] | None:
    if workspace_only:
        return {"team": {"null": True}}
    if team_key:
        return {"or": [{"team": {"key": {"eq": team_key.upper()}}}, {"team": {"null": True}}]}
    return None


def list_labels(
    client: GraphQLRequester, team_key: str | None = None, workspace_only: bool = False
) -> list[Label]:
    """All labels visible from ``team_key`` (or everywhere), sorted by name."""
    nodes = paginate(
        client,
        LABELS_QUERY,
        {"filter": _label_filter(team_key, workspace_only)},
        lambda d: d.get("issueLabels"),
    )
    labels = [Label.from_node(n) for n in nodes if n.get("id")]
    return sorted(labels, key=lambda label: label.name.lower())


def resolve_label(
    client: GraphQLRequester,
    name_or_id: str,
    team_key: str | None = None,
    chooser: LabelChooser | None = None,
) -> Label | None:
    name_or_id = name_or_id.strip()
    if not name_or_id:
        return None
    if is_uuid(name_or_id):
        label = _lookup_by_id(client, name_or_id)
        if label is not None:
            return label

    try:
        labels = find_labels_by_name(client, name_or_id)
    except LinearAPIError as exc:
        get_logger().debug("label name lookup failed", value=name_or_id, error=str(exc))
        return None
    if not labels:
        return None

    if team_key:
        wanted = team_key.lower()
        for label in labels:
            if label.team_key and label.team_key.lower() == wanted:
                return label
        for label in labels:
            if label.team_key is None:
                return label
        return None

    if len(labels) > 1 and chooser is not None:
        return chooser(name_or_id, labels)
    return labels[0]


def delete_label(client: GraphQLRequester, label_id: str) -> bool:
    data = client.request(LABEL_DELETE_MUTATION, {"id": label_id})
    return mutation_success(data, "issueLabelDelete")


def make_delete_operation(
    client: GraphQLRequester, team_key: str | None = None
) -> Callable[[str], OperationResult]:
    def operation(value: str) -> OperationResult:
        label = resolve_label(client, value, team_key)
        if label is None:
            return OperationResult.failed(value, "Label not found", name=value)
        if not delete_label(client, label.id):
            return OperationResult.failed(label.id, "Delete operation failed", name=label.display)
        return OperationResult.ok(label.id, name=label.display)

    return operation


__all__ = [
    "Label",
    "LabelChooser",
    "delete_label",
    "find_labels_by_name",
    "list_labels",
    "make_delete_operation",
    "resolve_label",
]
