"""linearctl CLI.

Commands:
  issue delete            -> delete issues (single or bulk)
  initiative list         -> list initiatives, filtered by status
  initiative archive      -> archive initiatives (single or bulk)
  initiative unarchive    -> restore archived initiatives (single or bulk)
  initiative delete       -> permanently delete initiatives (single or bulk)
  document list           -> list documents, optionally by project or issue
  document delete         -> move documents to the trash (single or bulk)
  label list              -> list a team's labels plus workspace labels
  label delete            -> delete issue labels (single or bulk)
  team delete             -> delete a team, relocating its issues first

Bulk mode is selected by any of ``--bulk``, ``--bulk-file`` or
``--bulk-stdin``; the process exits non-zero when any item fails.
The list commands print a table, JSON (``--json``) or bare identifiers
(``--ids``, one per line, ready to pipe into ``--bulk-stdin``).
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from linearctl import documents, initiatives, issues, labels, teams
from linearctl.bulk import collect_bulk_ids, is_bulk_mode, print_bulk_summary, run_bulk
from linearctl.config import CliConfig
from linearctl.errors import BulkInputError, ConfigError, LinearAPIError, error_message
from linearctl.graphql import GraphQLRequester, build_client
from linearctl.logging import get_logger
from linearctl.models import ExecutionOptions, OperationResult
from linearctl.runtime import execute_command, prepare_config
from linearctl.ux import (
    choose,
    confirm,
    is_interactive,
    print_error,
    print_info,
    print_success,
    print_table,
    print_warning,
    prompt_text,
)

CONFIG_HELP = "Path to linearctl.config.yaml (default: search working directory)"
EXIT_INTERRUPTED = 130

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


@dataclass(frozen=True)
class _BulkVerb:
    entity: str
    operation_name: str  # past tense, e.g. "deleted"
    verb: str  # imperative, e.g. "delete"


ISSUE_DELETE = _BulkVerb("issue", "deleted", "delete")
INITIATIVE_ARCHIVE = _BulkVerb("initiative", "archived", "archive")
INITIATIVE_UNARCHIVE = _BulkVerb("initiative", "unarchived", "unarchive")
INITIATIVE_DELETE = _BulkVerb("initiative", "deleted", "delete")
DOCUMENT_DELETE = _BulkVerb("document", "deleted", "delete")
LABEL_DELETE = _BulkVerb("label", "deleted", "delete")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1 (got {number})")
    return number


def _add_common(p: argparse.ArgumentParser, *, confirm_flags: bool = True) -> None:
    p.add_argument("--config", help=CONFIG_HELP)
    p.add_argument("--no-color", action="store_true", help="Disable colored output")
    if not confirm_flags:
        return
    p.add_argument(
        "-y",
        "-f",
        "--yes",
        "--force",
        "--confirm",
        dest="force",
        action="store_true",
        help="Skip confirmation prompt",
    )


def _add_bulk(p: argparse.ArgumentParser, plural: str, what: str) -> None:
    p.add_argument("--bulk", nargs="+", metavar="ID", help=f"{what} multiple {plural}")
    p.add_argument(
        "--bulk-file", metavar="FILE", help=f"Read {plural} identifiers from a file (one per line)"
    )
    p.add_argument(
        "--bulk-stdin", action="store_true", help=f"Read {plural} identifiers from stdin"
    )
    p.add_argument(
        "--concurrency",
        type=_positive_int,
        help="Maximum operations in flight at once (default: 5)",
    )
    p.add_argument("--no-progress", action="store_true", help="Hide the live progress line")
    p.add_argument(
        "--json", action="store_true", help="Print the bulk summary as JSON instead of text"
    )


def _add_listing(p: argparse.ArgumentParser, ident: str) -> None:
    _add_common(p, confirm_flags=False)
    output = p.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Print results as JSON")
    output.add_argument(
        "--ids", action="store_true", help=f"Print only {ident}s, one per line (for --bulk-stdin)"
    )


def _build_parser() -> argparse.ArgumentParser:
    """Construct top-level CLI parser with nested entity/action subcommands."""
    p = _FormatterArgumentParser(
        prog="linearctl", description="Bulk-capable Linear command line client"
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors (env: LINEARCTL_QUIET=1)",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    issue = sub.add_parser("issue", aliases=["i"], help="Manage issues")
    issue_sub = issue.add_subparsers(dest="action", required=True, metavar="<action>")
    idel = issue_sub.add_parser("delete", aliases=["d"], help="Delete an issue")
    idel.add_argument("id", nargs="?", metavar="ISSUE", help="Issue identifier (e.g. ENG-123)")
    idel.add_argument("--team", help="Team key used to expand bare issue numbers")
    _add_common(idel)
    _add_bulk(idel, "issues", "Delete")
    idel.set_defaults(command="issue delete")

    init = sub.add_parser("initiative", aliases=["init"], help="Manage initiatives")
    init_sub = init.add_subparsers(dest="action", required=True, metavar="<action>")
    ilist = init_sub.add_parser("list", aliases=["ls"], help="List initiatives")
    ilist.add_argument(
        "-s", "--status", help="Filter by status: active, planned, completed (default: active)"
    )
    ilist.add_argument(
        "--all-statuses", action="store_true", help="Show initiatives in every status"
    )
    ilist.add_argument("--archived", action="store_true", help="Include archived initiatives")
    _add_listing(ilist, "slug")
    ilist.set_defaults(command="initiative list")
    for action, help_text, verb in (
        ("archive", "Archive an initiative", "Archive"),
        ("unarchive", "Unarchive an initiative", "Unarchive"),
        ("delete", "Permanently delete an initiative", "Delete"),
    ):
        ip = init_sub.add_parser(action, help=help_text)
        ip.add_argument("id", nargs="?", metavar="INITIATIVE", help="Initiative ID, slug, or name")
        _add_common(ip)
        _add_bulk(ip, "initiatives", verb)
        ip.set_defaults(command=f"initiative {action}")

    doc = sub.add_parser("document", aliases=["doc"], help="Manage documents")
    doc_sub = doc.add_subparsers(dest="action", required=True, metavar="<action>")
    dlist = doc_sub.add_parser("list", aliases=["ls"], help="List documents")
    dlist.add_argument("--project", metavar="SLUG", help="Only documents in this project")
    dlist.add_argument("--issue", metavar="ISSUE", help="Only documents attached to this issue")
    dlist.add_argument(
        "--limit",
        type=_positive_int,
        default=documents.DEFAULT_LIST_LIMIT,
        help=f"Maximum documents to show (default: {documents.DEFAULT_LIST_LIMIT})",
    )
    _add_listing(dlist, "slug")
    dlist.set_defaults(command="document list")
    ddel = doc_sub.add_parser("delete", aliases=["d"], help="Delete a document (moves to trash)")
    ddel.add_argument("id", nargs="?", metavar="DOCUMENT", help="Document slug or ID")
    _add_common(ddel)
    _add_bulk(ddel, "documents", "Delete")
    ddel.set_defaults(command="document delete")

    label = sub.add_parser("label", aliases=["l"], help="Manage issue labels")
    label_sub = label.add_subparsers(dest="action", required=True, metavar="<action>")
    llist = label_sub.add_parser("list", aliases=["ls"], help="List issue labels")
    llist.add_argument("-t", "--team", help="Team key (default: configured team)")
    scope = llist.add_mutually_exclusive_group()
    scope.add_argument("--workspace", action="store_true", help="Only workspace-level labels")
    scope.add_argument("--all", action="store_true", help="Labels from every team")
    _add_listing(llist, "label ID")
    llist.set_defaults(command="label list")
    ldel = label_sub.add_parser("delete", help="Delete an issue label")
    ldel.add_argument("id", nargs="?", metavar="LABEL", help="Label name or ID")
    ldel.add_argument("-t", "--team", help="Team key to disambiguate labels with the same name")
    _add_common(ldel)
    _add_bulk(ldel, "labels", "Delete")
    ldel.set_defaults(command="label delete")

    team = sub.add_parser("team", aliases=["t"], help="Manage teams")
    team_sub = team.add_subparsers(dest="action", required=True, metavar="<action>")
    tdel = team_sub.add_parser("delete", help="Delete a team")
    tdel.add_argument("key", metavar="TEAM_KEY", help="Key of the team to delete")
    tdel.add_argument(
        "--move-issues",
        metavar="TARGET_TEAM",
        help="Move all issues to this team before deletion",
    )
    tdel.add_argument(
        "--concurrency",
        type=_positive_int,
        help="Maximum issue moves in flight at once (default: 5)",
    )
    _add_common(tdel)
    tdel.set_defaults(command="team delete")

    return p


# ---- bulk ------------------------------------------------------------------


def _bulk_requested(args: argparse.Namespace) -> bool:
    return is_bulk_mode(args.bulk, args.bulk_file, args.bulk_stdin)


def _run_bulk_command(
    cfg: CliConfig,
    args: argparse.Namespace,
    kind: _BulkVerb,
    operation: Callable[[str], OperationResult],
) -> int:
    color = cfg.color_enabled
    if args.bulk_stdin:
        if is_interactive(sys.stdin):
            print_error("--bulk-stdin requires identifiers to be piped in", color=color)
            return 1
        if not args.force:
            print_error(
                "--bulk-stdin requires --force: stdin is not available for the confirmation prompt",
                color=color,
            )
            return 1

    ids = collect_bulk_ids(args.bulk, args.bulk_file, args.bulk_stdin)
    if not ids:
        print_error(f"No {kind.entity} identifiers provided for bulk {kind.verb}.", color=color)
        return 1

    if not args.json:
        print(f"Found {len(ids)} {kind.entity}(s) to {kind.verb}.")
    if not args.force and not confirm(
        f"{kind.verb.capitalize()} {len(ids)} {kind.entity}(s)?", default=False
    ):
        print(f"Bulk {kind.verb} cancelled.")
        return 0

    options = ExecutionOptions(
        show_progress=cfg.show_progress and not args.json,
        color_enabled=color,
        concurrency=cfg.bulk_concurrency,
        force=args.force,
    )
    summary = run_bulk(ids, operation, options, action=f"{kind.entity}_{kind.verb}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_bulk_summary(
            summary,
            entity_name=kind.entity,
            operation_name=kind.operation_name,
            operation_verb=kind.verb,
            color_enabled=color,
            show_details=True,
        )
    return 1 if summary.failed > 0 else 0


def _missing_id(entity: str, color: bool) -> int:
    print_error(f"{entity.capitalize()} ID required. Use --bulk for multiple {entity}s.", color=color)
    return 1


# ---- issue -----------------------------------------------------------------


def _cmd_issue_delete(cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester) -> int:
    color = cfg.color_enabled
    if _bulk_requested(args):
        return _run_bulk_command(
            cfg, args, ISSUE_DELETE, issues.make_delete_operation(client, cfg.team_key)
        )
    if not args.id:
        return _missing_id("issue", color)

    resolved = issues.resolve_issue_identifier(args.id, cfg.team_key)
    issue = issues.fetch_issue(client, resolved) if resolved else None
    if issue is None:
        print_error(f"Could not find issue with ID: {args.id}", color=color)
        return 1

    if not args.force and not confirm(
        f'Are you sure you want to delete "{issue.display}"?', default=False
    ):
        print("Delete cancelled.")
        return 0

    if not issues.delete_issue(client, issue.id):
        print_error("Failed to delete issue", color=color)
        return 1
    print_success(f"Successfully deleted issue: {issue.display}", color=color)
    return 0


# ---- initiative ------------------------------------------------------------


def _load_initiative(
    client: GraphQLRequester, value: str, color: bool
) -> initiatives.Initiative | None:
    resolved = initiatives.resolve_initiative_id(client, value)
    initiative = initiatives.fetch_initiative(client, resolved) if resolved else None
    if initiative is None:
        print_error(f"Initiative not found: {value}", color=color)
    return initiative


def _cmd_initiative_archive(
    cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester
) -> int:
    color = cfg.color_enabled
    if _bulk_requested(args):
        return _run_bulk_command(
            cfg, args, INITIATIVE_ARCHIVE, initiatives.make_archive_operation(client)
        )
    if not args.id:
        return _missing_id("initiative", color)

    initiative = _load_initiative(client, args.id, color)
    if initiative is None:
        return 1
    if initiative.archived:
        print(f'Initiative "{initiative.name}" is already archived.')
        return 0
    if not args.force and not confirm(f'Archive initiative "{initiative.name}"?', default=True):
        print("Archive cancelled.")
        return 0

    if not initiatives.archive_initiative(client, initiative.id):
        print_error("Failed to archive initiative", color=color)
        return 1
    print_success(f"Archived initiative: {initiative.name}", color=color)
    return 0


def _cmd_initiative_unarchive(
    cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester
) -> int:
    color = cfg.color_enabled
    if _bulk_requested(args):
        return _run_bulk_command(
            cfg, args, INITIATIVE_UNARCHIVE, initiatives.make_unarchive_operation(client)
        )
    if not args.id:
        return _missing_id("initiative", color)

    initiative = _load_initiative(client, args.id, color)
    if initiative is None:
        return 1
    if not initiative.archived:
        print(f'Initiative "{initiative.name}" is not archived.')
        return 0
    if not args.force and not confirm(
        f'Are you sure you want to unarchive "{initiative.name}"?', default=False
    ):
        print("Unarchive cancelled.")
        return 0

    if not initiatives.unarchive_initiative(client, initiative.id):
        print_error("Failed to unarchive initiative", color=color)
        return 1
    print_success(f"Unarchived initiative: {initiative.name}", color=color)
    return 0


def _cmd_initiative_delete(
    cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester
) -> int:
    color = cfg.color_enabled
    if _bulk_requested(args):
        return _run_bulk_command(
            cfg, args, INITIATIVE_DELETE, initiatives.make_delete_operation(client)
        )
    if not args.id:
        return _missing_id("initiative", color)

    initiative = _load_initiative(client, args.id, color)
    if initiative is None:
        return 1
    if initiative.project_count > 0:
        print_warning(
            f'Initiative "{initiative.name}" has {initiative.project_count} linked project(s). '
            "Deleting the initiative will unlink these projects.",
            color=color,
        )

    if not args.force:
        print_warning("This action is PERMANENT and cannot be undone.", color=color)
        if not confirm(
            f'Are you sure you want to permanently delete "{initiative.name}"?', default=False
        ):
            print("Delete cancelled.")
            return 0
        typed = prompt_text("Type the initiative name to confirm deletion:")
        if typed != initiative.name:
            print("Name does not match. Delete cancelled.")
            return 0

    if not initiatives.delete_initiative(client, initiative.id):
        print_error("Failed to delete initiative", color=color)
        return 1
    print_success(f"Permanently deleted initiative: {initiative.name}", color=color)
    return 0


# ---- document --------------------------------------------------------------


def _cmd_document_delete(
    cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester
) -> int:
    color = cfg.color_enabled
    if _bulk_requested(args):
        return _run_bulk_command(cfg, args, DOCUMENT_DELETE, documents.make_delete_operation(client))
    if not args.id:
        return _missing_id("document", color)

    document = documents.fetch_document(client, args.id)
    if document is None:
        print_error(f"Document not found: {args.id}", color=color)
        return 1
    if not args.force and not confirm(
        f'Are you sure you want to delete "{document.title}"?', default=False
    ):
        print("Delete cancelled.")
        return 0

    if not documents.delete_document(client, document.id):
        print_error("Failed to delete document", color=color)
        return 1
    print_success(f"Deleted document: {document.title}", color=color)
    return 0


# ---- label -----------------------------------------------------------------


def _choose_label(name: str, candidates: Sequence[labels.Label]) -> labels.Label | None:
    options = [
        (f"{label.name} ({label.team_key or 'Workspace'}) - {label.color or 'no color'}", label)
        for label in candidates
    ]
    return choose(f'Multiple labels named "{name}" found. Which one?', options)


def _cmd_label_delete(cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester) -> int:
    color = cfg.color_enabled
    if _bulk_requested(args):
        return _run_bulk_command(
            cfg, args, LABEL_DELETE, labels.make_delete_operation(client, cfg.team_key)
        )
    if not args.id:
        return _missing_id("label", color)

    chooser = _choose_label if is_interactive(sys.stdout) else None
    label = labels.resolve_label(client, args.id, cfg.team_key, chooser=chooser)
    if label is None:
        print_error(f"Label not found: {args.id}", color=color)
        if cfg.team_key:
            print(f"(searched in team {cfg.team_key} and workspace)", file=sys.stderr)
        return 1

    if not args.force and not confirm(
        f'Are you sure you want to delete label "{label.display}"?', default=False
    ):
        print("Deletion cancelled.")
        return 0

    if not labels.delete_label(client, label.id):
        print_error("Failed to delete label", color=color)
        return 1
    print_success(f"Deleted label: {label.display}", color=color)
    return 0


# ---- team ------------------------------------------------------------------


def _pick_target_team(
    client: GraphQLRequester, team: teams.Team, move_to: str | None, color: bool
) -> str | None:
    if move_to:
        target_id = teams.resolve_team_id(client, move_to)
        if not target_id:
            print_error(f"Target team not found: {move_to}", color=color)
            return None
        if target_id == team.id:
            print_error("Cannot move issues to the same team", color=color)
            return None
        return target_id

    others = [t for t in teams.list_teams(client) if t.id != team.id]
    if not others:
        print_error("No other teams available to move issues to.", color=color)
        return None
    target_id = choose(
        "Select a team to move issues to:", [(f"{t.name} ({t.key})", t.id) for t in others]
    )
    if target_id is None:
        print("Delete cancelled.")
    return target_id


def _cmd_team_delete(cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester) -> int:
    color = cfg.color_enabled
    team_id = teams.resolve_team_id(client, args.key)
    team = teams.fetch_team(client, team_id) if team_id else None
    if team is None:
        print_error(f"Team not found: {args.key}", color=color)
        return 1

    team_issues = teams.list_team_issue_ids(client, team.id)
    if team_issues:
        if not args.move_issues:
            print_warning(
                f"Team {team.key} ({team.name}) has {len(team_issues)} issue(s). "
                "You must move these issues to another team before deletion.",
                color=color,
            )
        target_id = _pick_target_team(client, team, args.move_issues, color)
        if target_id is None:
            return 1 if args.move_issues else 0

        print_info(f"Moving {len(team_issues)} issue(s) to target team...", color=color)
        options = ExecutionOptions(
            show_progress=cfg.show_progress,
            color_enabled=color,
            concurrency=cfg.bulk_concurrency,
        )
        summary = teams.move_issues(client, [i for i, _ in team_issues], target_id, options)
        if summary.failed:
            print_bulk_summary(
                summary,
                entity_name="issue",
                operation_name="moved",
                operation_verb="move",
                color_enabled=color,
            )
            print_error("Team was not deleted because some issues could not be moved", color=color)
            return 1
        print_success(f"Moved {summary.succeeded} issue(s)", color=color)

    if not args.force and not confirm(
        f'Are you sure you want to delete team "{team.display}"?', default=False
    ):
        print("Delete cancelled.")
        return 0

    if not teams.delete_team(client, team.id):
        print_error("Failed to delete team", color=color)
        return 1
    print_success(f"Successfully deleted team: {team.display}", color=color)
    return 0


# ---- listing ---------------------------------------------------------------


def _print_listing(
    cfg: CliConfig,
    args: argparse.Namespace,
    items: Sequence[Any],
    *,
    headers: Sequence[str],
    row: Callable[[Any], Sequence[str]],
    ident: Callable[[Any], str],
    empty: str,
) -> None:
    if args.json:
        print(json.dumps([item.to_dict() for item in items], indent=2))
    elif args.ids:
        for item in items:
            print(ident(item))
    elif not items:
        print_info(empty, color=cfg.color_enabled)
    else:
        print_table(headers, [row(item) for item in items], color=cfg.color_enabled)


def _cmd_initiative_list(
    cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester
) -> int:
    status: str | None = "Active"
    if args.status:
        status = initiatives.parse_status(args.status)
        if status is None:
            valid = ", ".join(s.lower() for s in initiatives.INITIATIVE_STATUSES)
            print_error(
                f"Invalid status: {args.status}. Valid values: {valid}", color=cfg.color_enabled
            )
            return 1
    elif args.all_statuses:
        status = None

    with get_logger().timed_operation("initiative_list", status=status or "all"):
        found = initiatives.list_initiatives(client, status, include_archived=args.archived)
    _print_listing(
        cfg,
        args,
        found,
        headers=("SLUG", "NAME", "STATUS", "PROJECTS", "TARGET"),
        row=lambda i: (
            i.slug_id or i.id,
            i.name + (" (archived)" if i.archived else ""),
            i.status or "-",
            str(i.project_count),
            (i.target_date or "-")[:10],
        ),
        ident=lambda i: i.slug_id or i.id,
        empty="No initiatives found.",
    )
    return 0


def _cmd_document_list(cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester) -> int:
    with get_logger().timed_operation("document_list", limit=args.limit):
        found = documents.list_documents(
            client, project=args.project, issue=args.issue, limit=args.limit
        )
    _print_listing(
        cfg,
        args,
        found,
        headers=("SLUG", "TITLE", "ATTACHMENT", "UPDATED"),
        row=lambda d: (d.slug_id or d.id, d.title, d.attachment, (d.updated_at or "-")[:10]),
        ident=lambda d: d.slug_id or d.id,
        empty="No documents found.",
    )
    return 0


def _cmd_label_list(cfg: CliConfig, args: argparse.Namespace, client: GraphQLRequester) -> int:
    team_key = None if args.all or args.workspace else cfg.team_key
    with get_logger().timed_operation("label_list", team=team_key or "all"):
        found = labels.list_labels(client, team_key=team_key, workspace_only=args.workspace)
    _print_listing(
        cfg,
        args,
        found,
        headers=("ID", "NAME", "COLOR", "TEAM"),
        row=lambda lb: (lb.id, lb.name, lb.color or "-", lb.team_key or "Workspace"),
        ident=lambda lb: lb.id,
        empty="No labels found.",
    )
    if found and not (args.json or args.ids):
        print(f"\n{len(found)} labels found.")
    return 0


# ---- dispatch --------------------------------------------------------------


_COMMANDS: dict[str, Callable[[CliConfig, argparse.Namespace, GraphQLRequester], int]] = {
    "issue delete": _cmd_issue_delete,
    "initiative list": _cmd_initiative_list,
    "initiative archive": _cmd_initiative_archive,
    "initiative unarchive": _cmd_initiative_unarchive,
    "initiative delete": _cmd_initiative_delete,
    "document list": _cmd_document_list,
    "document delete": _cmd_document_delete,
    "label list": _cmd_label_list,
    "label delete": _cmd_label_delete,
    "team delete": _cmd_team_delete,
}


def _build_handlers(args: argparse.Namespace, cfg: CliConfig) -> dict[str, Callable[[], int]]:
    def bind(fn: Callable[[CliConfig, argparse.Namespace, GraphQLRequester], int]) -> Callable[[], int]:
        return lambda: fn(cfg, args, build_client(cfg))

    return {name: bind(fn) for name, fn in _COMMANDS.items()}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.quiet and os.environ.get("LINEARCTL_QUIET") == "1":
        args.quiet = True
    try:
        cfg = prepare_config(args)
    except ConfigError as exc:
        print_error(error_message(exc))
        return 1
    handler = _build_handlers(args, cfg).get(args.command)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return 1
    try:
        return execute_command(handler, args.command)
    except (BulkInputError, ConfigError, LinearAPIError) as exc:
        print_error(error_message(exc), color=cfg.color_enabled)
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted", color=cfg.color_enabled)
        return EXIT_INTERRUPTED


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
