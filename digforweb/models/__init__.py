"""
Models package.

``entities`` holds the canonical dataclasses; ``user`` and ``storage`` are
the database tables.
"""
from digforweb.models.entities import (
    EntityKind, Victim, Case, Evidence, ForensicAction, Snapshot,
    ForensicStage, ActionStatus
)
from digforweb.models.user import User
from digforweb.models.storage import StoredCollection

__all__ = [
    'EntityKind', 'Victim', 'Case', 'Evidence', 'ForensicAction', 'Snapshot',
    'ForensicStage', 'ActionStatus',
    'User', 'StoredCollection',
]
