"""UpgradeService — ledger schema migration with Alembic.

Pipeline: BACKUP → MIGRATE → VALIDATE → REPORT
"""

from __future__ import annotations

import logging
from typing import Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from commctl.infrastructure.database.migrations import build_config, db_url_for
from commctl.services.base import BaseService
from commctl.services.result import ErrorCode, ServiceResult
from commctl.services.telemetry import traced

logger = logging.getLogger(__name__)


class UpgradeService(BaseService):
    """Handles ledger schema migrations via Alembic."""

    def _db_url(self) -> str:
        return db_url_for(self._market.root)

    def _tables_exist(self) -> bool:
        """Check if ledger tables exist without version tracking."""
        insp = inspect(self._market.engine)
        return "commissions" in insp.get_table_names()

    @traced
    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"

        try:
            cfg = build_config(self._db_url())
            script = ScriptDirectory.from_config(cfg)
            head = script.get_current_head()

            with self._market.engine.connect() as conn:
                ctx = MigrationContext.configure(conn)
                current = ctx.get_current_revision()

            # Walk from head down to current
            pending: list[dict[str, Any]] = []
            if current != head and head is not None:
                rev_obj = script.get_revision(head)
                while rev_obj is not None and rev_obj.revision != current:
                    pending.append(
                        {
                            "revision": rev_obj.revision,
                            "description": rev_obj.doc or "",
                        }
                    )
                    down = rev_obj.down_revision
                    if down is None:
                        break
                    rev_obj = script.get_revision(str(down))

            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "pending_count": len(pending),
                    "pending": pending,
                    "current": current,
                    "head": head,
                },
            )
        except Exception as exc:
            logger.debug("Migration check failed", exc_info=True)
            return ServiceResult.failure(
                op, ErrorCode.CHECK_FAILED, f"Failed to check migrations: {exc}"
            )

    @traced
    def apply(self) -> ServiceResult:
        """BACKUP → MIGRATE → VALIDATE → REPORT pipeline."""
        op = "upgrade"
        warnings: list[str] = []

        check_result = self.check_pending()
        if not check_result.ok:
            return check_result

        pending_count = check_result.data["pending_count"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check_result.data["head"],
                    "message": "Database is already up to date",
                },
            )

        # BACKUP
        from commctl.services.check import CheckService

        try:
            backup_path = CheckService(self._market)._backup_db()
        except Exception as exc:
            return ServiceResult.failure(op, ErrorCode.BACKUP_FAILED, f"Backup failed: {exc}")

        # MIGRATE (or STAMP when tables predate version tracking)
        try:
            cfg = build_config(self._db_url())
            current = check_result.data.get("current")
            if current is None and self._tables_exist():
                command.stamp(cfg, "head")
            else:
                command.upgrade(cfg, "head")
        except Exception as exc:
            return ServiceResult.failure(
                op,
                ErrorCode.MIGRATION_FAILED,
                f"Migration failed: {exc}. Backup at: {backup_path}",
                backup_path=str(backup_path),
            )

        # VALIDATE
        integrity = CheckService(self._market).check(min_severity="error")
        if integrity.ok and integrity.data["count"] > 0:
            warnings.append(
                f"Post-migration integrity check found {integrity.data['count']} errors"
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": pending_count,
                "current": check_result.data["head"],
                "backup_path": str(backup_path),
            },
            warnings=warnings,
        )

    def stamp_current(self) -> ServiceResult:
        """Stamp DB as at current head (for freshly created DBs)."""
        op = "upgrade"

        try:
            cfg = build_config(self._db_url())
            command.stamp(cfg, "head")
            head = ScriptDirectory.from_config(cfg).get_current_head()
        except Exception as exc:
            return ServiceResult.failure(
                op, ErrorCode.STAMP_FAILED, f"Failed to stamp database: {exc}"
            )

        return ServiceResult(ok=True, op=op, data={"stamped": True, "current": head})
