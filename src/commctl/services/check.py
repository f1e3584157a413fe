"""CheckService — ledger integrity report, backup, and rollback.

Single read-only check following the linter pattern. Three categories:
referential integrity, ledger invariants, structural validation.

Rows are read as raw columns rather than through the entity models so
that a corrupted row is reported instead of aborting the scan.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from commctl.domain.ids import validate_id
from commctl.domain.lifecycle import CommissionStatus
from commctl.infrastructure.database.engine import DATA_DIRNAME
from commctl.infrastructure.database.schema import artists, commissions, customers
from commctl.services._helpers import now_compact
from commctl.services.base import BaseService
from commctl.services.result import ErrorCode, ServiceResult
from commctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from sqlalchemy import Row


# ---------------------------------------------------------------------------
# Issue severity and category constants
# ---------------------------------------------------------------------------

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

_SEVERITY_RANK = {SEVERITY_WARNING: 0, SEVERITY_ERROR: 1}

CAT_REFERENCES = "referential_integrity"
CAT_LEDGER = "ledger_invariants"
CAT_STRUCTURAL = "structural_validation"

BACKUP_PREFIX = "commctl-"

_KNOWN_STATUSES = frozenset(s.value for s in CommissionStatus)
_URL_REQUIRED = frozenset({CommissionStatus.ARTWORK_SUBMITTED, CommissionStatus.APPROVED})


def _issue(category: str, severity: str, entity_id: str | None, message: str) -> dict[str, Any]:
    return {
        "category": category,
        "severity": severity,
        "entity_id": entity_id,
        "message": message,
    }


# ---------------------------------------------------------------------------
# CheckService
# ---------------------------------------------------------------------------


class CheckService(BaseService):
    """Handles ledger integrity checking and backup restore."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def check(self, *, min_severity: str = SEVERITY_WARNING) -> ServiceResult:
        """Report integrity issues without modifying anything.

        Issues below *min_severity* are dropped from the report.
        """
        if min_severity not in _SEVERITY_RANK:
            return ServiceResult.failure(
                "check",
                ErrorCode.INVALID_INPUT,
                f"Unknown severity: {min_severity}",
                allowed=sorted(_SEVERITY_RANK),
            )

        issues: list[dict[str, Any]] = []
        with self._market.snapshot() as txn:
            conn = txn.conn
            artist_rows = conn.execute(
                select(artists.c.id, artists.c.price, artists.c.revision_budget)
            ).fetchall()
            customer_ids = [row.id for row in conn.execute(select(customers.c.id))]
            commission_rows = conn.execute(select(*commissions.c)).fetchall()

            with trace_span("referential_integrity"):
                issues.extend(
                    self._check_references(commission_rows, artist_rows, customer_ids)
                )
            with trace_span("ledger_invariants"):
                issues.extend(self._check_ledger(commission_rows, artist_rows))
            with trace_span("structural_validation"):
                issues.extend(
                    self._check_structural(artist_rows, customer_ids, commission_rows)
                )

        threshold = _SEVERITY_RANK[min_severity]
        issues = [i for i in issues if _SEVERITY_RANK[i["severity"]] >= threshold]

        warnings: list[str] = []
        self._dispatch_event("post_check", {"issues_found": len(issues)}, warnings)

        return ServiceResult(
            ok=True,
            op="check",
            data={
                "issues": issues,
                "count": len(issues),
                "errors": sum(1 for i in issues if i["severity"] == SEVERITY_ERROR),
                "counts": {
                    "artists": len(artist_rows),
                    "customers": len(customer_ids),
                    "commissions": len(commission_rows),
                },
            },
            warnings=warnings,
        )

    @traced
    def rollback(self) -> ServiceResult:
        """Restore the ledger from the latest backup."""
        op = "rollback"
        backup_dir = self._backup_dir()
        if not backup_dir.exists():
            return ServiceResult.failure(op, ErrorCode.NO_BACKUP, "No backup directory found")

        backups = sorted(backup_dir.glob(f"{BACKUP_PREFIX}*.db"))
        if not backups:
            return ServiceResult.failure(op, ErrorCode.NO_BACKUP, "No backup files found")

        latest = backups[-1]
        try:
            self._market.restore_from(latest)
        except OSError as exc:
            return ServiceResult.failure(
                op,
                ErrorCode.ROLLBACK_FAILED,
                f"Failed to restore {latest.name}: {exc}",
                backup_file=latest.name,
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "backup_file": latest.name,
                "restored_from": str(latest),
            },
        )

    # ------------------------------------------------------------------
    # Backup helpers
    # ------------------------------------------------------------------

    def _backup_dir(self) -> Path:
        return self._market.root / DATA_DIRNAME / "backups"

    def _backup_db(self) -> Path:
        """Create a timestamped backup of the database."""
        backup_dir = self._backup_dir()
        backup_dir.mkdir(parents=True, exist_ok=True)

        backup_path = backup_dir / f"{BACKUP_PREFIX}{now_compact()}.db"
        self._market.backup_to(backup_path)

        self._prune_backups(backup_dir)
        return backup_path

    def _prune_backups(self, backup_dir: Path) -> None:
        """Remove old backups exceeding retention settings."""
        max_count = self._market.settings.check.backup_max_count
        backups = sorted(backup_dir.glob(f"{BACKUP_PREFIX}*.db"))

        # Keep newest
        if len(backups) > max_count:
            for old in backups[: len(backups) - max_count]:
                old.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Check categories (read-only)
    # ------------------------------------------------------------------

    def _check_references(
        self,
        commission_rows: list[Row[Any]],
        artist_rows: list[Row[Any]],
        customer_ids: list[str],
    ) -> list[dict[str, Any]]:
        """Category 1: every commission points at an existing artist and customer."""
        issues: list[dict[str, Any]] = []
        artist_ids = {row.id for row in artist_rows}
        known_customers = set(customer_ids)

        for row in commission_rows:
            if row.artist_id not in artist_ids:
                issues.append(
                    _issue(
                        CAT_REFERENCES,
                        SEVERITY_ERROR,
                        row.id,
                        f"Commission references missing artist '{row.artist_id}'",
                    )
                )
            if row.customer_id not in known_customers:
                issues.append(
                    _issue(
                        CAT_REFERENCES,
                        SEVERITY_ERROR,
                        row.id,
                        f"Commission references missing customer '{row.customer_id}'",
                    )
                )
        return issues

    def _check_ledger(
        self,
        commission_rows: list[Row[Any]],
        artist_rows: list[Row[Any]],
    ) -> list[dict[str, Any]]:
        """Category 2: revision budget, price snapshot, artwork URL."""
        issues: list[dict[str, Any]] = []
        by_id = {row.id: row for row in artist_rows}

        for row in commission_rows:
            if row.remaining_revisions < 0:
                issues.append(
                    _issue(
                        CAT_LEDGER,
                        SEVERITY_ERROR,
                        row.id,
                        f"Negative remaining revisions: {row.remaining_revisions}",
                    )
                )

            artist = by_id.get(row.artist_id)
            if artist is not None:
                if row.remaining_revisions > artist.revision_budget:
                    issues.append(
                        _issue(
                            CAT_LEDGER,
                            SEVERITY_ERROR,
                            row.id,
                            (
                                f"Remaining revisions {row.remaining_revisions} exceed "
                                f"artist budget {artist.revision_budget}"
                            ),
                        )
                    )
                if row.price != artist.price:
                    issues.append(
                        _issue(
                            CAT_LEDGER,
                            SEVERITY_WARNING,
                            row.id,
                            f"Price {row.price} differs from artist price {artist.price}",
                        )
                    )

            if row.status in _URL_REQUIRED and not row.artwork_url:
                issues.append(
                    _issue(
                        CAT_LEDGER,
                        SEVERITY_ERROR,
                        row.id,
                        f"Status '{row.status}' without an artwork URL",
                    )
                )
        return issues

    def _check_structural(
        self,
        artist_rows: list[Row[Any]],
        customer_ids: list[str],
        commission_rows: list[Row[Any]],
    ) -> list[dict[str, Any]]:
        """Category 3: ID format and status validity."""
        issues: list[dict[str, Any]] = []

        id_groups: list[tuple[str, list[str]]] = [
            ("artist", [row.id for row in artist_rows]),
            ("customer", customer_ids),
            ("commission", [row.id for row in commission_rows]),
        ]
        for entity_type, ids in id_groups:
            for entity_id in ids:
                if not validate_id(entity_id, entity_type):
                    issues.append(
                        _issue(
                            CAT_STRUCTURAL,
                            SEVERITY_WARNING,
                            entity_id,
                            f"Malformed {entity_type} ID: '{entity_id}'",
                        )
                    )

        for row in commission_rows:
            if row.status not in _KNOWN_STATUSES:
                issues.append(
                    _issue(
                        CAT_STRUCTURAL,
                        SEVERITY_ERROR,
                        row.id,
                        f"Unknown commission status: '{row.status}'",
                    )
                )
        return issues
