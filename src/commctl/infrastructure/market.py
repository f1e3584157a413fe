"""Marketplace — sole owner of the ledger tables.

The Marketplace is the single dependency injected into every service. It
owns the database engine and hands out :class:`MarketTransaction` objects
whose three :class:`EntityStore` instances are bound to one connection:

- :meth:`Marketplace.transaction` serializes writers. A process-wide lock
  orders writers in this process; ``BEGIN IMMEDIATE`` orders them across
  processes. Commit on success, rollback on any exception.
- :meth:`Marketplace.snapshot` opens a deferred read transaction. Under WAL
  it sees a consistent snapshot and does not block the writer.

The tables are never exposed for direct mutation outside these blocks.
"""

from __future__ import annotations

import logging
import shutil
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from commctl.domain.models import Artist, Commission, Customer
from commctl.infrastructure.database.engine import READ_ONLY_OPTION, db_path_for, init_database
from commctl.infrastructure.database.schema import artists, commissions, customers
from commctl.infrastructure.store import EntityStore

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from commctl.config.settings import CommSettings
    from commctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

# Guards every write transaction in this process.
_WRITE_LOCK = threading.Lock()


# ---------------------------------------------------------------------------
# MarketTransaction: yielded by transaction() and snapshot()
# ---------------------------------------------------------------------------


@dataclass
class MarketTransaction:
    """Active transaction context with the three ledger stores.

    ``read_only`` transactions are produced by :meth:`Marketplace.snapshot`;
    services must not ``put`` through them.
    """

    conn: Connection
    read_only: bool = False
    artists: EntityStore[Artist] = field(init=False, repr=False)
    customers: EntityStore[Customer] = field(init=False, repr=False)
    commissions: EntityStore[Commission] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.artists = EntityStore(self.conn, artists, Artist)
        self.customers = EntityStore(self.conn, customers, Customer)
        self.commissions = EntityStore(self.conn, commissions, Commission)


# ---------------------------------------------------------------------------
# Marketplace
# ---------------------------------------------------------------------------


class Marketplace:
    """Repository encapsulating the ledger database.

    Constructed once at CLI startup from :class:`CommSettings` and stored
    on the Click context object.  Services receive the Marketplace via
    their :class:`BaseService` constructor.

    An empty database is created on first use; later instances on the
    same root rehydrate the existing ledger.
    """

    def __init__(self, settings: CommSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._plugins: PluginManager | None = None
        logger.debug("Opened ledger at %s", self.db_path)

    @property
    def root(self) -> Path:
        """The market root directory."""
        return self._settings.market_root

    @property
    def db_path(self) -> Path:
        """Location of the ledger database file."""
        return db_path_for(self.root)

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> CommSettings:
        """The resolved settings for this market."""
        return self._settings

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None if not initialized)."""
        return self._plugins

    def init_plugins(self) -> None:
        """Discover entry-point and local plugins.

        Called by AppContext when the market is first accessed. No-op when
        ``[plugins] enabled = false``.
        """
        config = self._settings.plugins
        if not config.enabled:
            return

        from commctl.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load(local_dir=self.root / config.local_dir)
        self._plugins = pm

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance, creating the manager on first use."""
        if self._plugins is None:
            from commctl.plugins.manager import PluginManager

            self._plugins = PluginManager()
        self._plugins.register_plugin(plugin, name=name)

    @contextmanager
    def transaction(self) -> Iterator[MarketTransaction]:
        """Serialized write transaction over the three stores.

        Commits when the block exits normally and rolls back if it raises,
        so an operation either persists all of its effect or none of it.

        Usage::

            with market.transaction() as txn:
                previous = txn.commissions.put(commission.id, commission)
        """
        with _WRITE_LOCK, self._engine.begin() as conn:
            yield MarketTransaction(conn=conn)

    @contextmanager
    def snapshot(self) -> Iterator[MarketTransaction]:
        """Read-only view of the stores at a single point in time."""
        with self._engine.connect() as conn:
            conn.execution_options(**{READ_ONLY_OPTION: True})
            with conn.begin():
                yield MarketTransaction(conn=conn, read_only=True)

    def backup_to(self, dest: Path) -> Path:
        """Copy the ledger database to *dest*.

        The WAL is checkpointed into the main file first so the copy holds
        every committed transaction. Writers are held off while copying.
        """
        with _WRITE_LOCK:
            raw = self._engine.raw_connection()
            try:
                raw.driver_connection.execute("PRAGMA wal_checkpoint(TRUNCATE)")
            finally:
                raw.close()
            shutil.copy2(str(self.db_path), str(dest))
        logger.debug("Backed up ledger to %s", dest)
        return dest

    def restore_from(self, source: Path) -> None:
        """Replace the ledger database with the file at *source*.

        Pooled connections are released and the WAL sidecar files removed
        so no stale pages are replayed over the restored file.
        """
        with _WRITE_LOCK:
            self._engine.dispose()
            for suffix in ("-wal", "-shm"):
                Path(f"{self.db_path}{suffix}").unlink(missing_ok=True)
            shutil.copy2(str(source), str(self.db_path))
        logger.debug("Restored ledger from %s", source)

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
