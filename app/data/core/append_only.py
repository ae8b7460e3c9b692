"""
Append-only guard for ledger, audit and slip records.

Models mixing in AppendOnlyMixin can be inserted but never updated or deleted
through the ORM. The listeners propagate to every mapped subclass.
"""

from sqlalchemy import event
from sqlalchemy.orm import object_session
from app.buisness.core.errors import ImmutableRecordError


class AppendOnlyMixin:
    """Marker mixin; see the mapper listeners below"""
    pass


@event.listens_for(AppendOnlyMixin, 'before_update', propagate=True)
def _reject_update(mapper, connection, target):
    session = object_session(target)
    # Collection changes (e.g. appending lines to a slip) mark the parent dirty
    # without touching its own columns
    if session is not None and not session.is_modified(target, include_collections=False):
        return
    raise ImmutableRecordError(mapper.class_.__name__, target.id)


@event.listens_for(AppendOnlyMixin, 'before_delete', propagate=True)
def _reject_delete(mapper, connection, target):
    raise ImmutableRecordError(mapper.class_.__name__, target.id)
