"""linearctl - command line client for Linear with bulk operations.

High-level public API:

from linearctl import build_client, issues, load_config, run_bulk

cfg = load_config()
client = build_client(cfg)
summary = run_bulk(["ENG-1", "ENG-2"], issues.make_delete_operation(client))
print(summary.succeeded, summary.failed)

The CLI (``linearctl`` / ``python -m linearctl``) is a thin layer over these
helpers.
"""

from __future__ import annotations

from .bulk import BulkExecutor, collect_bulk_ids, execute_bulk, run_bulk
from .config import CliConfig, load_config
from .graphql import LinearClient, build_client
from .models import ExecutionOptions, ExecutionSummary, OperationResult

__version__ = "0.1.0"

__all__ = [
    "BulkExecutor",
    "CliConfig",
    "ExecutionOptions",
    "ExecutionSummary",
    "LinearClient",
    "OperationResult",
    "__version__",
    "build_client",
    "collect_bulk_ids",
    "execute_bulk",
    "load_config",
    "run_bulk",
]
