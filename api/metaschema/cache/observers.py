"""
Schema cache invalidation driven by SQLAlchemy session events.

Changes to catalog, override and suppression rows are collected on flush and
applied after commit: tenant-scoped changes bump that tenant's version,
system-scope changes (system fields, their options, suppression links) issue
a global flush. A rollback drops whatever was collected.

Bulk Query.update()/delete() bypass the unit of work and are not observed;
callers doing bulk writes must call the cache directly.
"""

import itertools
import logging
from typing import Optional

from sqlalchemy import event, select
from sqlalchemy.orm import Session

from metaschema.cache.schema_cache import SchemaCache
from metaschema.models.metadata_field import MetadataField, MetadataOption
from metaschema.models.visibility import (
    MetadataFieldVisibility,
    MetadataOptionVisibility,
    SystemCategoryFieldSuppression,
)

logger = logging.getLogger(__name__)

PENDING_KEY = "metaschema.pending_invalidation"


class _Pending:
    def __init__(self):
        self.tenant_ids = set()
        self.flush_global = False


class SchemaCacheInvalidator:
    """Observes session commits and invalidates the schema cache accordingly."""

    def __init__(self, cache: SchemaCache):
        self.cache = cache

    def attach(self, session_factory) -> None:
        """Register listeners on a sessionmaker (or Session class)."""
        event.listen(session_factory, "after_flush", self._after_flush)
        event.listen(session_factory, "after_commit", self._after_commit)
        event.listen(session_factory, "after_rollback", self._after_rollback)

    def detach(self, session_factory) -> None:
        event.remove(session_factory, "after_flush", self._after_flush)
        event.remove(session_factory, "after_commit", self._after_commit)
        event.remove(session_factory, "after_rollback", self._after_rollback)

    def _after_flush(self, session: Session, flush_context) -> None:
        # One slot per invalidator; several may observe the same session
        pending = session.info.setdefault(PENDING_KEY, {}).setdefault(self, _Pending())
        for obj in itertools.chain(session.new, session.dirty, session.deleted):
            self._collect(session, obj, pending)

    def _collect(self, session: Session, obj, pending: _Pending) -> None:
        if isinstance(obj, MetadataField):
            self._add_owner(pending, obj.tenant_id)
        elif isinstance(obj, MetadataOption):
            self._add_owner(pending, self._field_tenant(session, obj.metadata_field_id))
        elif isinstance(obj, (MetadataFieldVisibility, MetadataOptionVisibility)):
            pending.tenant_ids.add(obj.tenant_id)
        elif isinstance(obj, SystemCategoryFieldSuppression):
            pending.flush_global = True

    @staticmethod
    def _add_owner(pending: _Pending, tenant_id: Optional[int]) -> None:
        if tenant_id is None:
            pending.flush_global = True
        else:
            pending.tenant_ids.add(tenant_id)

    @staticmethod
    def _field_tenant(session: Session, field_id: Optional[int]) -> Optional[int]:
        """Owning tenant of a field; None for system fields and unknown ids."""
        if field_id is None:
            return None
        row = session.connection().execute(
            select(MetadataField.tenant_id).where(MetadataField.id == field_id)
        ).first()
        return row[0] if row else None

    def _pop_pending(self, session: Session) -> Optional[_Pending]:
        return session.info.get(PENDING_KEY, {}).pop(self, None)

    def _after_commit(self, session: Session) -> None:
        pending = self._pop_pending(session)
        if pending is None:
            return
        for tenant_id in sorted(pending.tenant_ids):
            self.cache.bump_version(tenant_id)
        if pending.flush_global:
            self.cache.flush_global()

    def _after_rollback(self, session: Session) -> None:
        if self._pop_pending(session) is not None:
            logger.debug("Discarded pending metadata schema invalidation after rollback")
