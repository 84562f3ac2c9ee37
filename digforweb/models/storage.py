"""
Persisted collection blobs.

Each entity collection is stored wholesale as one serialized JSON array
under its own key, plus one key holding the identifier sequences.
"""
from datetime import datetime
from digforweb.extensions import db


class StoredCollection(db.Model):
    """Key/value row holding one serialized collection."""
    __tablename__ = 'stored_collections'

    key = db.Column(db.String(100), primary_key=True)
    payload = db.Column(db.Text, nullable=False, default='[]')
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<StoredCollection {self.key}>'
