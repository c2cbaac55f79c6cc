"""Document listing, lookups and deletion (deleted documents move to the trash)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .errors import LinearAPIError
from .graphql import GraphQLRequester, is_not_found, mutation_success
from .models import OperationResult

DEFAULT_LIST_LIMIT = 50

DOCUMENT_DETAILS_QUERY = """
query GetDocumentForDelete($id: String!) {
  document(id: $id) {
    id
    slugId
    title
  }
}
"""

DOCUMENTS_QUERY = """
query ListDocuments($filter: DocumentFilter, $first: Int) {
  documents(filter: $filter, first: $first) {
    nodes {
      id
      slugId
      title
      url
      updatedAt
      project {
        name
        slugId
      }
      issue {
        identifier
        title
      }
    }
  }
}
"""

DOCUMENT_DELETE_MUTATION = """
mutation DeleteDocument($id: String!) {
  documentDelete(id: $id) {
    success
  }
}
"""


@dataclass(frozen=True)
class Document:
    id: str
    slug_id: str | None
    title: str
    url: str | None = None
    updated_at: str | None = None
    project_name: str | None = None
    issue_identifier: str | None = None

    @property
    def attachment(self) -> str:
        """Project name, else issue identifier, else ``-``."""
        return self.project_name or self.issue_identifier or "-"

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> Document:
        project = node.get("project") if isinstance(node.get("project"), dict) else {}
        issue = node.get("issue") if isinstance(node.get("issue"), dict) else {}
        return cls(
            id=str(node["id"]),
            slug_id=node.get("slugId"),
            title=str(node.get("title") or node["id"]),
            url=node.get("url"),
            updated_at=node.get("updatedAt"),
            project_name=project.get("name"),
            issue_identifier=issue.get("identifier"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slugId": self.slug_id,
            "title": self.title,
            "url": self.url,
            "updatedAt": self.updated_at,
            "project": self.project_name,
            "issue": self.issue_identifier,
        }


def fetch_document(client: GraphQLRequester, id_or_slug: str) -> Document | None:
    """Look up a document by UUID or slug ID."""
    try:
        data = client.request(DOCUMENT_DETAILS_QUERY, {"id": id_or_slug})
    except LinearAPIError as exc:
        if is_not_found(exc):
            return None
        raise
    doc = data.get("document")
    if not isinstance(doc, dict):
        return None
    return Document(
        id=str(doc.get("id") or id_or_slug),
        slug_id=doc.get("slugId"),
        title=str(doc.get("title") or id_or_slug),
    )


def list_documents(
    client: GraphQLRequester,
    project: str | None = None,
    issue: str | None = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[Document]:
    """Documents, optionally narrowed to a project slug or an issue identifier."""
    doc_filter: dict[str, Any] = {}
    if project:
        doc_filter["project"] = {"slugId": {"eq": project}}
    if issue:
        doc_filter["issue"] = {"identifier": {"eq": issue.upper()}}
    data = client.request(DOCUMENTS_QUERY, {"filter": doc_filter or None, "first": limit})
    nodes = (data.get("documents") or {}).get("nodes") or []
    return [Document.from_node(n) for n in nodes if isinstance(n, dict) and n.get("id")]


def delete_document(client: GraphQLRequester, document_id: str) -> bool:
    data = client.request(DOCUMENT_DELETE_MUTATION, {"id": document_id})
    return mutation_success(data, "documentDelete")


def make_delete_operation(client: GraphQLRequester) -> Callable[[str], OperationResult]:
    def operation(value: str) -> OperationResult:
        document = fetch_document(client, value)
        if document is None:
            return OperationResult.failed(value, "Document not found", name=value)
        if not delete_document(client, document.id):
            return OperationResult.failed(
                document.id, "Delete operation failed", name=document.title
            )
        return OperationResult.ok(document.id, name=document.title)

    return operation


__all__ = [
    "DEFAULT_LIST_LIMIT",
    "Document",
    "delete_document",
    "fetch_document",
    "list_documents",
    "make_delete_operation",
]
