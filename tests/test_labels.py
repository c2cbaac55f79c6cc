from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from linearctl.errors import LinearAPIError
from linearctl.labels import (
    Label,
    delete_label,
    list_labels,
    make_delete_operation,
    resolve_label,
)

UUID = "0f8fad5b-d9cb-469f-a165-70867728950e"


def _label(label_id: str, team: str | None) -> dict[str, Any]:
    return {
        "id": label_id,
        "name": "Bug",
        "color": "#ff0000",
        "team": {"key": team, "name": f"{team} team"} if team else None,
    }


def _by_name(*nodes: dict[str, Any]) -> dict[str, Any]:
    return {"issueLabels": {"nodes": list(nodes)}}


def test_label_display() -> None:
    assert Label.from_node(_label("l1", "ENG")).display == "Bug (ENG)"
    assert Label.from_node(_label("l2", None)).display == "Bug (Workspace)"


def test_resolve_by_uuid(scripted_client: Any) -> None:
    client = scripted_client({"GetLabelById": {"issueLabel": _label(UUID, "ENG")}})
    label = resolve_label(client, UUID)
    assert label is not None and label.id == UUID
    assert client.names() == ["GetLabelById"]


def test_resolve_uuid_miss_falls_back_to_name(scripted_client: Any) -> None:
    client = scripted_client(
        {
            "GetLabelById": LinearAPIError("GraphQL error: Entity not found"),
            "GetLabelByName": _by_name(),
        }
    )
    assert resolve_label(client, UUID) is None
    assert client.names() == ["GetLabelById", "GetLabelByName"]


def test_team_label_preferred_then_workspace(scripted_client: Any) -> None:
    client = scripted_client(
        {"GetLabelByName": _by_name(_label("ws", None), _label("ops", "OPS"), _label("eng", "ENG"))}
    )
    assert resolve_label(client, "bug", "eng").id == "eng"  # type: ignore[union-attr]
    assert resolve_label(client, "bug", "DESIGN").id == "ws"  # type: ignore[union-attr]


def test_team_filter_without_match_returns_none(scripted_client: Any) -> None:
    client = scripted_client({"GetLabelByName": _by_name(_label("ops", "OPS"))})
    assert resolve_label(client, "bug", "ENG") is None


def test_ambiguous_name_uses_chooser(scripted_client: Any) -> None:
    client = scripted_client({"GetLabelByName": _by_name(_label("a", "ENG"), _label("b", "OPS"))})
    seen: list[str] = []

    def chooser(name: str, candidates: Sequence[Label]) -> Label | None:
        seen.append(name)
        return candidates[1]

    assert resolve_label(client, "Bug", chooser=chooser).id == "b"  # type: ignore[union-attr]
    assert seen == ["Bug"]
    assert resolve_label(client, "Bug").id == "a"  # type: ignore[union-attr]


def test_delete_label(scripted_client: Any) -> None:
    client = scripted_client({"DeleteIssueLabel": {"issueLabelDelete": {"success": True}}})
    assert delete_label(client, "l1")


def test_delete_operation(scripted_client: Any) -> None:
    client = scripted_client(
        {
            "GetLabelByName": lambda v: _by_name(_label("l1", "ENG")) if v["name"] == "Bug" else _by_name(),
            "DeleteIssueLabel": {"issueLabelDelete": {"success": True}},
        }
    )
    op = make_delete_operation(client, "ENG")
    ok = op("Bug")
    assert ok.success and ok.id == "l1" and ok.name == "Bug (ENG)"
    missing = op("Feature")
    assert not missing.success and missing.error == "Label not found" and missing.id == "Feature"


def _labels_page(names: list[tuple[str, str | None]], cursor: str | None) -> dict[str, Any]:
    nodes = [
        {"id": f"id-{name}", "name": name, "color": "#000", "team": {"key": team} if team else None}
        for name, team in names
    ]
    return {
        "issueLabels": {
            "nodes": nodes,
            "pageInfo": {"hasNextPage": cursor is not None, "endCursor": cursor},
        }
    }


def test_list_labels_paginates_and_sorts(scripted_client: Any) -> None:
    pages = {
        None: _labels_page([("bug", "ENG"), ("Feature", None)], "c1"),
        "c1": _labels_page([("Chore", "ENG")], None),
    }
    client = scripted_client({"GetIssueLabels": lambda v: pages[v["after"]]})
    found = list_labels(client, team_key="eng")
    assert [label.name for label in found] == ["bug", "Chore", "Feature"]
    assert client.calls[0][1]["filter"] == {
        "or": [{"team": {"key": {"eq": "ENG"}}}, {"team": {"null": True}}]
    }
    assert len(client.calls) == 2


def test_list_labels_scopes(scripted_client: Any) -> None:
    client = scripted_client({"GetIssueLabels": _labels_page([], None)})
    list_labels(client, team_key="ENG", workspace_only=True)
    list_labels(client)
    assert client.calls[0][1]["filter"] == {"team": {"null": True}}
    assert client.calls[1][1]["filter"] is None
