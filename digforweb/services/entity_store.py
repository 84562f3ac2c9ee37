"""
Entity store.

The single source of truth for Victims, Cases, Evidence and Forensic
Actions during a request. Every operation goes through the permission
policy; mutations then go through FK validation (create/update) or the
cascade rules (delete), are persisted through the backend, and only then
replace the in-memory snapshot and notify subscribers.
"""
import logging
from dataclasses import fields, replace
from datetime import datetime

from flask import current_app, g
from flask_login import current_user

from digforweb.exceptions import NotFoundError, ValidationError
from digforweb.models.entities import (
    ActionStatus, ENTITY_CLASSES, EntityKind, ForensicStage,
    IMMUTABLE_FIELDS, PARENT_KEYS, REQUIRED_FIELDS, child_kinds, to_dict
)
from digforweb.services import permissions
from digforweb.services.cascade import delete_cascade, plan_deletion

logger = logging.getLogger(__name__)


def _to_int(value):
    if isinstance(value, bool):
        raise ValueError('boolean is not an identifier')
    if isinstance(value, float) and not value.is_integer():
        raise ValueError('fractional number is not an identifier')
    return int(value)


def _to_enum(enum_cls):
    def coerce(value):
        if isinstance(value, enum_cls):
            return value
        return enum_cls(str(value).strip().lower())
    return coerce


_COERCERS = {
    EntityKind.VICTIM: {},
    EntityKind.CASE: {'victim_id': _to_int},
    EntityKind.EVIDENCE: {'case_id': _to_int},
    EntityKind.ACTION: {
        'case_id': _to_int,
        'stage': _to_enum(ForensicStage),
        'status': _to_enum(ActionStatus),
    },
}


def _text_fields(kind):
    return {f.name for f in fields(ENTITY_CLASSES[kind]) if f.type is str}


class EntityStore:
    """
    Holds the current snapshot and the role of the acting user.

    Args:
        backend: object with ``load()`` and ``save(snapshot, sequences)``
        role: role of the acting user; unknown roles may do nothing
    """

    def __init__(self, backend, role=None):
        self.backend = backend
        self.role = role
        self.permissions = permissions.permissions_for(role)
        self._subscribers = []
        self._snapshot, self._sequences = backend.load()

    @property
    def snapshot(self):
        return self._snapshot

    def refresh(self):
        """Reload state from the backend."""
        self._snapshot, self._sequences = self.backend.load()
        return self._snapshot

    # Subscriptions

    def subscribe(self, callback):
        """
        Register ``callback(kind, operation, entity_id)``, called after each
        successful mutation. Returns a function that unsubscribes it.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self, kind, operation, entity_id):
        for callback in list(self._subscribers):
            try:
                callback(kind, operation, entity_id)
            except Exception as e:
                logger.warning(f'Store subscriber failed after {operation} on {kind.value}: {e}')

    # Reads

    def list(self, kind):
        permissions.require_permission(self.role, permissions.VIEW)
        return self._snapshot.collection(kind)

    def find(self, kind, entity_id):
        permissions.require_permission(self.role, permissions.VIEW)
        return self._snapshot.find(kind, entity_id)

    def get(self, kind, entity_id):
        entity = self.find(kind, entity_id)
        if entity is None:
            raise NotFoundError(kind, entity_id)
        return entity

    def exists(self, kind, entity_id):
        return entity_id is not None and self._snapshot.find(kind, entity_id) is not None

    def children_of(self, kind, entity_id):
        """Direct dependents of an entity, keyed by child kind."""
        permissions.require_permission(self.role, permissions.VIEW)
        children = {}
        for child_kind in child_kinds(kind):
            fk_attr, _ = PARENT_KEYS[child_kind]
            children[child_kind] = tuple(
                e for e in self._snapshot.collection(child_kind)
                if getattr(e, fk_attr) == entity_id
            )
        return children

    def preview_delete(self, kind, entity_id):
        """The ``DeletionPlan`` a delete of this entity would apply."""
        permissions.require_permission(self.role, permissions.VIEW)
        return plan_deletion(self._snapshot, kind, entity_id)

    def can_create(self, kind):
        """False while the FK parent collection of ``kind`` is empty."""
        if kind not in PARENT_KEYS:
            return True
        _, parent_kind = PARENT_KEYS[kind]
        return len(self._snapshot.collection(parent_kind)) > 0

    # Mutations

    def create(self, kind, values):
        """
        Create an entity from canonical field values.

        Raises:
            PermissionDeniedError: role may not create
            ValidationError: required field missing or FK target absent
            TransportError: backend failed; nothing was changed
        """
        permissions.require_permission(self.role, permissions.CREATE)
        cleaned = self._clean(kind, values)
        if not cleaned.get('status'):
            # Falls back to the dataclass default
            cleaned.pop('status', None)
        self._validate(kind, cleaned)

        new_id = self._next_id(kind)
        entity = ENTITY_CLASSES[kind](id=new_id, created_at=datetime.utcnow(), **cleaned)

        snapshot = self._snapshot.with_collection(
            kind, self._snapshot.collection(kind) + (entity,)
        )
        sequences = dict(self._sequences)
        sequences[kind.value] = new_id
        self._commit(snapshot, sequences)

        logger.info(f'Created {kind.label} #{new_id}')
        self._notify(kind, permissions.CREATE, new_id)
        return entity

    def update(self, kind, entity_id, values):
        """
        Update the non-identifier fields of an entity.

        Raises:
            PermissionDeniedError: role may not update
            NotFoundError: no entity with ``entity_id``
            ValidationError: merged values are invalid
            TransportError: backend failed; nothing was changed
        """
        permissions.require_permission(self.role, permissions.UPDATE)
        existing = self.get(kind, entity_id)
        cleaned = self._clean(kind, values)
        if 'status' in cleaned and not cleaned['status']:
            del cleaned['status']

        merged = to_dict(existing)
        merged.update(cleaned)
        self._validate(kind, merged, previous=existing)

        updated = replace(existing, **cleaned)
        snapshot = self._snapshot.with_collection(
            kind, [updated if e.id == entity_id else e for e in self._snapshot.collection(kind)]
        )
        self._commit(snapshot, self._sequences)

        logger.info(f'Updated {kind.label} #{entity_id}')
        self._notify(kind, permissions.UPDATE, entity_id)
        return updated

    def delete(self, kind, entity_id):
        """
        Delete an entity and everything that depends on it.

        Deleting an id that does not exist is a no-op.

        Returns:
            DeletionPlan of everything removed (empty for a no-op)
        """
        permissions.require_permission(self.role, permissions.DELETE)
        snapshot, plan = delete_cascade(self._snapshot, kind, entity_id)
        if plan.is_empty:
            logger.info(f'Delete of missing {kind.label} #{entity_id} ignored')
            return plan

        self._commit(snapshot, self._sequences)

        logger.info(f'Deleted {kind.label} #{entity_id} (cascade: {plan.counts()})')
        self._notify(kind, permissions.DELETE, entity_id)
        return plan

    # Internals

    def _commit(self, snapshot, sequences):
        self.backend.save(snapshot, sequences)
        self._snapshot = snapshot
        self._sequences = sequences

    def _next_id(self, kind):
        # Ids are never reused: the sequence only grows, even after deletes.
        highest = max(self._snapshot.ids(kind), default=0)
        return max(int(self._sequences.get(kind.value, 0)), highest) + 1

    def _clean(self, kind, values):
        allowed = {f.name for f in fields(ENTITY_CLASSES[kind])} - set(IMMUTABLE_FIELDS)
        text_fields = _text_fields(kind)
        coercers = _COERCERS[kind]

        cleaned = {}
        errors = {}
        for name, value in (values or {}).items():
            if name not in allowed:
                continue
            if name in text_fields:
                value = '' if value is None else str(value).strip()
            elif value is not None and value != '' and name in coercers:
                try:
                    value = coercers[name](value)
                except (TypeError, ValueError):
                    errors.setdefault(name, []).append(f'Invalid value: {value!r}')
                    continue
            elif value == '':
                value = None
            cleaned[name] = value
        if errors:
            raise ValidationError(errors)
        return cleaned

    def _validate(self, kind, values, previous=None):
        errors = {}
        for name in REQUIRED_FIELDS[kind]:
            value = values.get(name)
            if value is None or (isinstance(value, str) and not value):
                errors.setdefault(name, []).append('This field is required.')

        if kind in PARENT_KEYS:
            fk_attr, parent_kind = PARENT_KEYS[kind]
            fk = values.get(fk_attr)
            changed = previous is None or getattr(previous, fk_attr) != fk
            if fk is not None and changed and self._snapshot.find(parent_kind, fk) is None:
                if not self._snapshot.collection(parent_kind):
                    message = f'No {parent_kind.label} exists yet; create one first.'
                else:
                    message = f'{parent_kind.label} #{fk} does not exist.'
                errors.setdefault(fk_attr, []).append(message)

        if errors:
            raise ValidationError(errors)


def _current_role():
    api_user = g.get('api_user')
    if api_user is not None:
        return api_user.role
    if current_user and current_user.is_authenticated:
        return current_user.role
    return None


def get_store():
    """
    The request's ``EntityStore``, bound to the acting user's role and the
    configured blob backend.
    """
    if 'entity_store' not in g:
        from digforweb.services.backends import BlobBackend
        from digforweb.services.dashboard_service import invalidate_dashboard_cache

        backend = BlobBackend(current_app.config['STORAGE_KEY_PREFIX'])
        store = EntityStore(backend, role=_current_role())
        store.subscribe(invalidate_dashboard_cache)
        g.entity_store = store
    return g.entity_store
