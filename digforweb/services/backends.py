"""
Storage backends for the entity store.

A backend loads and saves the whole state at once: a ``Snapshot`` of the
four collections plus the identifier sequences (last id handed out per
collection). ``save`` either persists everything or raises
``TransportError`` having persisted nothing.
"""
import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from digforweb.exceptions import TransportError, ValidationError
from digforweb.extensions import db
from digforweb.models.entities import EntityKind, Snapshot
from digforweb.models.storage import StoredCollection
from digforweb.services.serializers import BLOB_ADAPTER

logger = logging.getLogger(__name__)


class MemoryBackend:
    """Process-local backend, used by tests and one-off scripts."""

    def __init__(self, snapshot=None, sequences=None):
        self._snapshot = snapshot or Snapshot()
        self._sequences = dict(sequences or {})
        self.saves = 0

    def load(self):
        return self._snapshot, dict(self._sequences)

    def save(self, snapshot, sequences):
        self._snapshot = snapshot
        self._sequences = dict(sequences)
        self.saves += 1


class BlobBackend:
    """
    Persists each collection as a camelCase JSON array in the
    ``stored_collections`` table.

    Keys are ``<prefix>_victims``, ``<prefix>_cases``, ``<prefix>_evidence``,
    ``<prefix>_actions`` and ``<prefix>_sequences``. All keys are written in
    one transaction.

    Saving locks the sequences row and refuses to write when another writer
    has handed out ids since this backend last loaded or saved, so an id is
    never given to two records.
    """

    def __init__(self, prefix='digforweb'):
        self.prefix = prefix
        self._known_sequences = None

    def key_for(self, kind):
        return f'{self.prefix}_{kind.value}'

    @property
    def sequences_key(self):
        return f'{self.prefix}_sequences'

    def load(self):
        keys = [self.key_for(kind) for kind in EntityKind] + [self.sequences_key]
        try:
            rows = StoredCollection.query.filter(StoredCollection.key.in_(keys)).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Failed to load stored collections: {e}')
            raise TransportError()

        payloads = {row.key: row.payload for row in rows}
        try:
            collections = {}
            for kind in EntityKind:
                records = json.loads(payloads.get(self.key_for(kind)) or '[]')
                collections[kind.value] = tuple(
                    BLOB_ADAPTER.load_entity(kind, record) for record in records
                )
            sequences = json.loads(payloads.get(self.sequences_key) or '{}')
        except (ValueError, ValidationError) as e:
            logger.error(f'Stored collections are corrupt: {e}')
            raise TransportError('Stored data could not be read.')

        self._known_sequences = dict(sequences)
        return Snapshot(**collections), sequences

    def save(self, snapshot, sequences):
        try:
            stored = self._locked_sequences()
            if self._known_sequences is not None and stored != self._known_sequences:
                db.session.rollback()
                logger.warning(f'Sequences under {self.prefix} changed since load; save refused')
                raise TransportError(
                    'Records were changed by another request. Reload and try again.'
                )
            for kind in EntityKind:
                self._put(self.key_for(kind), BLOB_ADAPTER.dump_many(snapshot.collection(kind)))
            self._put(self.sequences_key, sequences)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Failed to save stored collections: {e}')
            raise TransportError()
        self._known_sequences = dict(sequences)

    def clear(self):
        """Remove every key owned by this backend."""
        keys = [self.key_for(kind) for kind in EntityKind] + [self.sequences_key]
        try:
            StoredCollection.query.filter(StoredCollection.key.in_(keys)).delete(
                synchronize_session=False
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Failed to clear stored collections: {e}')
            raise TransportError()

    def _put(self, key, value):
        row = db.session.get(StoredCollection, key)
        if row is None:
            row = StoredCollection(key=key)
            db.session.add(row)
        row.payload = json.dumps(value)

    def _locked_sequences(self):
        row = (
            StoredCollection.query
            .filter_by(key=self.sequences_key)
            .with_for_update()
            .populate_existing()
            .first()
        )
        return json.loads(row.payload) if row is not None else {}
