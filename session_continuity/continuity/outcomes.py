"""
OutcomeReporter - handoffs in the artifact index that lack an outcome.

The artifact index is a SQLite database maintained by other tooling. It is
queried read-only through the sqlite3 CLI with a short timeout. Any failure
(missing database, missing CLI, query error, timeout, undecodable output)
is reported as a failed OutcomeQueryResult; callers that only want records use
query_records(), which collapses failures to an empty list.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_INDEX_PATH = Path(".claude") / "cache" / "artifact-index" / "context.db"
DEFAULT_LIMIT = 5
DEFAULT_TIMEOUT_SECONDS = 3.0

UNMARKED_QUERY = (
    "SELECT id, session_name, task_number, "
    "replace(replace(task_summary, char(13), ' '), char(10), ' ') FROM handoffs "
    "WHERE outcome = 'UNKNOWN' ORDER BY indexed_at DESC LIMIT {limit}"
)


@dataclass
class UnmarkedOutcome:
    """A handoff record with no outcome label.

    Attributes:
        id: Index record identifier.
        session_name: Session the handoff belongs to.
        task_number: Task number, None for auto handoffs.
        summary: Task summary ("" when the index has none).
    """

    id: str
    session_name: str
    task_number: Optional[str] = None
    summary: str = ""

    @classmethod
    def from_row(cls, line: str) -> Optional["UnmarkedOutcome"]:
        """Parse one pipe-delimited row; None for blank or fragmentary lines."""
        if not line.strip():
            return None
        parts = line.split("|", 3)
        if len(parts) < 2:
            return None
        parts += [""] * (4 - len(parts))
        record_id, session_name, task_number, summary = parts
        return cls(
            id=record_id,
            session_name=session_name,
            task_number=task_number or None,
            summary=summary,
        )


@dataclass
class OutcomeQueryResult:
    """Result of querying the index: records on success, error otherwise."""

    success: bool
    records: List[UnmarkedOutcome] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def ok(cls, records: List[UnmarkedOutcome]) -> "OutcomeQueryResult":
        return cls(success=True, records=records)

    @classmethod
    def failure(cls, error: str) -> "OutcomeQueryResult":
        return cls(success=False, error=error)


class OutcomeReporter:
    """
    Queries the artifact index for handoffs lacking an outcome.

    Attributes:
        index_path: Database path, relative to the project root unless absolute.
        sqlite_binary: sqlite3 CLI to run.
        timeout_seconds: Upper bound on the query.
        limit: Maximum number of records returned.
    """

    def __init__(
        self,
        index_path: str | Path = DEFAULT_INDEX_PATH,
        sqlite_binary: str = "sqlite3",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        limit: int = DEFAULT_LIMIT,
    ):
        self.index_path = Path(index_path)
        self.sqlite_binary = sqlite_binary
        self.timeout_seconds = timeout_seconds
        self.limit = limit

    def db_path_for(self, project_root: str | Path) -> Path:
        if self.index_path.is_absolute():
            return self.index_path
        return Path(project_root) / self.index_path

    def query(self, project_root: str | Path) -> OutcomeQueryResult:
        """
        Fetch up to `limit` unmarked handoffs, most recently indexed first.

        Args:
            project_root: Project whose index should be queried.

        Returns:
            OutcomeQueryResult. Never raises.
        """
        db_path = self.db_path_for(project_root)
        if not db_path.is_file():
            return OutcomeQueryResult.failure(f"Artifact index not found: {db_path}")

        cmd = [
            self.sqlite_binary,
            str(db_path),
            UNMARKED_QUERY.format(limit=int(self.limit)),
        ]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            return OutcomeQueryResult.failure(f"Index query timed out after {e.timeout} seconds")
        except FileNotFoundError as e:
            return OutcomeQueryResult.failure(f"sqlite3 CLI not found: {e}")
        except OSError as e:
            return OutcomeQueryResult.failure(f"Index query failed: {e}")
        except UnicodeDecodeError as e:
            return OutcomeQueryResult.failure(f"Index output is not valid UTF-8: {e}")

        if result.returncode != 0:
            return OutcomeQueryResult.failure(
                f"Index query exited with {result.returncode}: {result.stderr.strip()}"
            )

        records = []
        for line in result.stdout.splitlines():
            record = UnmarkedOutcome.from_row(line)
            if record is not None:
                records.append(record)

        return OutcomeQueryResult.ok(records[: self.limit])

    def query_records(self, project_root: str | Path) -> List[UnmarkedOutcome]:
        """Records only; failures are logged and collapse to []."""
        result = self.query(project_root)
        if not result.success:
            logger.debug("Unmarked outcome query failed: %s", result.error)
            return []
        return result.records
