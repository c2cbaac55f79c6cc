"""Initiative listing, resolution, archival and deletion."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .errors import LinearAPIError
from .graphql import GraphQLRequester, is_uuid, mutation_success, paginate
from .logging import get_logger
from .models import OperationResult

# listing order; also the accepted values for the status filter
INITIATIVE_STATUSES = ("Active", "Planned", "Completed")

INITIATIVE_BY_SLUG_QUERY = """
query GetInitiativeBySlug($slugId: String!) {
  initiatives(filter: { slugId: { eq: $slugId } }, includeArchived: true) {
    nodes {
      id
      slugId
    }
  }
}
"""

INITIATIVE_BY_NAME_QUERY = """
query GetInitiativeByName($name: String!) {
  initiatives(filter: { name: { eqIgnoreCase: $name } }, includeArchived: true) {
    nodes {
      id
      name
    }
  }
}
"""

INITIATIVE_DETAILS_QUERY = """
query GetInitiativeDetails($id: ID!) {
  initiatives(filter: { id: { eq: $id } }, includeArchived: true) {
    nodes {
      id
      slugId
      name
      archivedAt
      projects {
        nodes {
          id
        }
      }
    }
  }
}
"""

INITIATIVES_QUERY = """
query GetInitiatives(
  $filter: InitiativeFilter
  $includeArchived: Boolean
  $first: Int
  $after: String
) {
  initiatives(
    filter: $filter
    includeArchived: $includeArchived
    first: $first
    after: $after
  ) {
    nodes {
      id
      slugId
      name
      status
      targetDate
      archivedAt
      owner {
        name
      }
      projects {
        nodes {
          id
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

INITIATIVE_ARCHIVE_MUTATION = """
mutation ArchiveInitiative($id: String!) {
  initiativeArchive(id: $id) {
    success
  }
}
"""

INITIATIVE_UNARCHIVE_MUTATION = """
mutation UnarchiveInitiative($id: String!) {
  initiativeUnarchive(id: $id) {
    success
  }
}
"""

INITIATIVE_DELETE_MUTATION = """
mutation DeleteInitiative($id: String!) {
  initiativeDelete(id: $id) {
    success
  }
}
"""


@dataclass(frozen=True)
class Initiative:
    id: str
    slug_id: str | None
    name: str
    archived_at: str | None = None
    project_count: int = 0
    status: str | None = None
    target_date: str | None = None
    owner: str | None = None

    @property
    def archived(self) -> bool:
        return bool(self.archived_at)

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> Initiative:
        projects = (node.get("projects") or {}).get("nodes") or []
        owner = node.get("owner") if isinstance(node.get("owner"), dict) else {}
        return cls(
            id=str(node["id"]),
            slug_id=node.get("slugId"),
            name=str(node.get("name") or node["id"]),
            archived_at=node.get("archivedAt"),
            project_count=len(projects),
            status=node.get("status"),
            target_date=node.get("targetDate"),
            owner=owner.get("name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slugId": self.slug_id,
            "name": self.name,
            "status": self.status,
            "targetDate": self.target_date,
            "owner": self.owner,
            "archivedAt": self.archived_at,
            "projectCount": self.project_count,
        }


def _first_node_id(data: dict[str, Any]) -> str | None:
    nodes = (data.get("initiatives") or {}).get("nodes") or []
    if nodes and isinstance(nodes[0], dict) and nodes[0].get("id"):
        return str(nodes[0]["id"])
    return None


def resolve_initiative_id(client: GraphQLRequester, value: str) -> str | None:
    """Map a UUID, slug or name (case-insensitive) to an initiative ID.

    Lookup failures fall through to the next strategy.
    """
    value = value.strip()
    if not value:
        return None
    if is_uuid(value):
        return value
    lookups = (
        (INITIATIVE_BY_SLUG_QUERY, {"slugId": value}),
        (INITIATIVE_BY_NAME_QUERY, {"name": value}),
    )
    for query, variables in lookups:
        try:
            found = _first_node_id(client.request(query, variables))
        except LinearAPIError as exc:
            get_logger().debug("initiative lookup failed", value=value, error=str(exc))
            continue
        if found:
            return found
    return None


def fetch_initiative(client: GraphQLRequester, initiative_id: str) -> Initiative | None:
    data = client.request(INITIATIVE_DETAILS_QUERY, {"id": initiative_id})
    nodes = (data.get("initiatives") or {}).get("nodes") or []
    if not nodes or not isinstance(nodes[0], dict):
        return None
    node = nodes[0]
    return Initiative.from_node({**node, "id": node.get("id") or initiative_id})


def parse_status(value: str) -> str | None:
    """Canonical status name for ``value`` (any case), or None if unknown."""
    for status in INITIATIVE_STATUSES:
        if status.lower() == value.strip().lower():
            return status
    return None


def _status_rank(initiative: Initiative) -> int:
    try:
        return INITIATIVE_STATUSES.index(initiative.status or "")
    except ValueError:
        return len(INITIATIVE_STATUSES)


def list_initiatives(
    client: GraphQLRequester, status: str | None = "Active", include_archived: bool = False
) -> list[Initiative]:
    """Initiatives in ``status`` (all statuses when None).

    Sorted Active, Planned, Completed, then by name.
    """
    variables: dict[str, Any] = {
        "filter": {"status": {"eq": status}} if status else None,
        "includeArchived": include_archived,
    }
    nodes = paginate(client, INITIATIVES_QUERY, variables, lambda d: d.get("initiatives"))
    found = [Initiative.from_node(n) for n in nodes if n.get("id")]
    return sorted(found, key=lambda i: (_status_rank(i), i.name.lower()))


def archive_initiative(client: GraphQLRequester, initiative_id: str) -> bool:
    data = client.request(INITIATIVE_ARCHIVE_MUTATION, {"id": initiative_id})
    return mutation_success(data, "initiativeArchive")


def unarchive_initiative(client: GraphQLRequester, initiative_id: str) -> bool:
    data = client.request(INITIATIVE_UNARCHIVE_MUTATION, {"id": initiative_id})
    return mutation_success(data, "initiativeUnarchive")


def delete_initiative(client: GraphQLRequester, initiative_id: str) -> bool:
    data = client.request(INITIATIVE_DELETE_MUTATION, {"id": initiative_id})
    return mutation_success(data, "initiativeDelete")


def _make_operation(
    client: GraphQLRequester,
    mutate: Callable[[GraphQLRequester, str], bool],
    verb: str,
    already_done: Callable[[Initiative], bool] | None = None,
) -> Callable[[str], OperationResult]:
    def operation(value: str) -> OperationResult:
        resolved = resolve_initiative_id(client, value)
        if resolved is None:
            return OperationResult.failed(value, "Initiative not found", name=value)
        initiative = fetch_initiative(client, resolved)
        if initiative is None:
            return OperationResult.failed(resolved, "Initiative not found", name=value)
        if already_done is not None and already_done(initiative):
            return OperationResult.ok(initiative.id, name=initiative.name)
        if not mutate(client, initiative.id):
            return OperationResult.failed(
                initiative.id, f"{verb} operation failed", name=initiative.name
            )
        return OperationResult.ok(initiative.id, name=initiative.name)

    return operation


def make_archive_operation(client: GraphQLRequester) -> Callable[[str], OperationResult]:
    return _make_operation(client, archive_initiative, "Archive", lambda i: i.archived)


def make_unarchive_operation(client: GraphQLRequester) -> Callable[[str], OperationResult]:
    return _make_operation(client, unarchive_initiative, "Unarchive", lambda i: not i.archived)


def make_delete_operation(client: GraphQLRequester) -> Callable[[str], OperationResult]:
    return _make_operation(client, delete_initiative, "Delete")


__all__ = [
    "INITIATIVE_STATUSES",
    "Initiative",
    "archive_initiative",
    "delete_initiative",
    "fetch_initiative",
    "list_initiatives",
    "make_archive_operation",
    "make_delete_operation",
    "make_unarchive_operation",
    "parse_status",
    "resolve_initiative_id",
    "unarchive_initiative",
]
