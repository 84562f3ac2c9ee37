"""
Serialization adapters.

The canonical model uses English snake_case attribute names. Two external
schemas map onto it:

- ``BLOB_ADAPTER``: camelCase records, the layout of the persisted
  collections (``victimId``, ``caseType``, ``hashValue``...).
- ``API_ADAPTER``: Indonesian snake_case records spoken by the REST API
  (``korban_id``, ``jenis_kasus``, ``status_kasus``...).

Neither naming convention leaks into the canonical model.
"""
from collections import namedtuple
from datetime import date, datetime, timezone

from digforweb.exceptions import ValidationError
from digforweb.models.entities import (
    ActionStatus, EntityKind, ENTITY_CLASSES, ForensicStage, IMMUTABLE_FIELDS
)


Codec = namedtuple('Codec', ['dump', 'load'])
FieldSpec = namedtuple('FieldSpec', ['attr', 'key', 'codec'])


def _dump_text(value):
    return value if value is not None else ''


def _load_text(value):
    if value is None:
        return ''
    return str(value).strip()


def _load_int(value):
    if value in (None, ''):
        return None
    if isinstance(value, bool):
        raise ValueError('boolean is not an identifier')
    if isinstance(value, float) and not value.is_integer():
        raise ValueError('fractional number is not an identifier')
    return int(value)


def _dump_date(value):
    return value.isoformat() if value else None


def _load_date(value):
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _dump_datetime(value):
    return value.isoformat() if value else None


def _load_datetime(value):
    """Parse ISO 8601; aware values are converted to naive UTC."""
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _enum_codec(enum_cls):
    def load(value):
        if isinstance(value, enum_cls):
            return value
        if value in (None, ''):
            return None
        return enum_cls(str(value).strip().lower())
    return Codec(dump=lambda v: v.value if v is not None else None, load=load)


def _mapped_text_codec(mapping):
    """Text codec translating canonical values to wire values and back."""
    reverse = {wire: canonical for canonical, wire in mapping.items()}

    def dump(value):
        value = _dump_text(value)
        return mapping.get(value.lower(), value)

    def load(value):
        value = _load_text(value)
        return reverse.get(value.lower(), value)
    return Codec(dump=dump, load=load)


TEXT = Codec(dump=_dump_text, load=_load_text)
INT = Codec(dump=lambda v: v, load=_load_int)
DATE = Codec(dump=_dump_date, load=_load_date)
DATETIME = Codec(dump=_dump_datetime, load=_load_datetime)
STAGE = _enum_codec(ForensicStage)
ACTION_STATUS = _enum_codec(ActionStatus)

INDONESIAN_CASE_STATUS = _mapped_text_codec({
    'active': 'dalam investigasi',
    'completed': 'selesai',
    'closed': 'ditutup',
})


class SerializationAdapter:
    """Maps canonical entities to one external record schema and back."""

    def __init__(self, name, schemas):
        self.name = name
        self.schemas = schemas

    def field_map(self, kind):
        """Canonical attribute -> external key."""
        return {spec.attr: spec.key for spec in self.schemas[kind]}

    def dump(self, entity):
        """External record for ``entity``."""
        return {
            spec.key: spec.codec.dump(getattr(entity, spec.attr))
            for spec in self.schemas[entity.kind]
        }

    def dump_many(self, entities):
        return [self.dump(entity) for entity in entities]

    def load_fields(self, kind, record, include_immutable=False):
        """
        Canonical field values present in ``record``.

        Keys absent from ``record`` are left out, so the result works for
        partial updates. Unknown keys are ignored, and so are ``id`` and
        ``created_at`` unless ``include_immutable`` is set.

        Raises:
            ValidationError: a value could not be parsed
        """
        if not isinstance(record, dict):
            raise ValidationError({'__all__': ['Expected a JSON object.']})

        loaded = {}
        errors = {}
        for spec in self.schemas[kind]:
            if spec.attr in IMMUTABLE_FIELDS and not include_immutable:
                continue
            if spec.key not in record:
                continue
            try:
                loaded[spec.attr] = spec.codec.load(record[spec.key])
            except (TypeError, ValueError):
                errors.setdefault(spec.key, []).append(
                    f'Invalid value: {record[spec.key]!r}'
                )
        if errors:
            raise ValidationError(errors)
        return loaded

    def load_entity(self, kind, record):
        """Full canonical entity from a stored record."""
        loaded = self.load_fields(kind, record, include_immutable=True)
        if loaded.get('id') is None:
            raise ValidationError({'id': ['Stored record has no identifier.']})
        loaded = {k: v for k, v in loaded.items() if v is not None}
        try:
            return ENTITY_CLASSES[kind](**loaded)
        except TypeError as e:
            raise ValidationError({'__all__': [str(e)]})


BLOB_ADAPTER = SerializationAdapter('blob', {
    EntityKind.VICTIM: [
        FieldSpec('id', 'id', INT),
        FieldSpec('name', 'name', TEXT),
        FieldSpec('contact', 'contact', TEXT),
        FieldSpec('location', 'location', TEXT),
        FieldSpec('report_date', 'reportDate', DATE),
        FieldSpec('report_description', 'reportDescription', TEXT),
        FieldSpec('created_at', 'createdAt', DATETIME),
    ],
    EntityKind.CASE: [
        FieldSpec('id', 'id', INT),
        FieldSpec('victim_id', 'victimId', INT),
        FieldSpec('case_type', 'caseType', TEXT),
        FieldSpec('incident_date', 'incidentDate', DATE),
        FieldSpec('summary', 'caseSummary', TEXT),
        FieldSpec('status', 'status', TEXT),
        FieldSpec('created_at', 'createdAt', DATETIME),
    ],
    EntityKind.EVIDENCE: [
        FieldSpec('id', 'id', INT),
        FieldSpec('case_id', 'caseId', INT),
        FieldSpec('evidence_type', 'evidenceType', TEXT),
        FieldSpec('storage_location', 'storageLocation', TEXT),
        FieldSpec('integrity_hash', 'hashValue', TEXT),
        FieldSpec('collected_at', 'collectionTime', DATETIME),
        FieldSpec('created_at', 'createdAt', DATETIME),
    ],
    EntityKind.ACTION: [
        FieldSpec('id', 'id', INT),
        FieldSpec('case_id', 'caseId', INT),
        FieldSpec('stage', 'forensicStage', STAGE),
        FieldSpec('description', 'actionDescription', TEXT),
        FieldSpec('person_in_charge', 'pic', TEXT),
        FieldSpec('executed_at', 'executionTime', DATETIME),
        FieldSpec('status', 'status', ACTION_STATUS),
        FieldSpec('created_at', 'createdAt', DATETIME),
    ],
})


API_ADAPTER = SerializationAdapter('api', {
    EntityKind.VICTIM: [
        FieldSpec('id', 'id', INT),
        FieldSpec('name', 'nama', TEXT),
        FieldSpec('contact', 'kontak', TEXT),
        FieldSpec('location', 'lokasi', TEXT),
        FieldSpec('report_date', 'tgl_laporan', DATE),
        FieldSpec('report_description', 'deskripsi_laporan', TEXT),
        FieldSpec('created_at', 'created_at', DATETIME),
    ],
    EntityKind.CASE: [
        FieldSpec('id', 'id', INT),
        FieldSpec('victim_id', 'korban_id', INT),
        FieldSpec('case_type', 'jenis_kasus', TEXT),
        FieldSpec('incident_date', 'tanggal_kejadian', DATE),
        FieldSpec('summary', 'ringkasan_kasus', TEXT),
        FieldSpec('status', 'status_kasus', INDONESIAN_CASE_STATUS),
        FieldSpec('created_at', 'created_at', DATETIME),
    ],
    EntityKind.EVIDENCE: [
        FieldSpec('id', 'id', INT),
        FieldSpec('case_id', 'case_id', INT),
        FieldSpec('evidence_type', 'jenis_bukti', TEXT),
        FieldSpec('storage_location', 'lokasi_penyimpanan', TEXT),
        FieldSpec('integrity_hash', 'hash_value', TEXT),
        FieldSpec('collected_at', 'waktu_pengambilan_bukti', DATETIME),
        FieldSpec('created_at', 'created_at', DATETIME),
    ],
    EntityKind.ACTION: [
        FieldSpec('id', 'id', INT),
        FieldSpec('case_id', 'case_id', INT),
        FieldSpec('stage', 'tahap_forensik', STAGE),
        FieldSpec('description', 'desk_tindakan', TEXT),
        FieldSpec('person_in_charge', 'pic', TEXT),
        FieldSpec('executed_at', 'waktu_pelaksanaan', DATETIME),
        FieldSpec('status', 'status_tindakan', ACTION_STATUS),
        FieldSpec('created_at', 'created_at', DATETIME),
    ],
})


def unwrap_envelope(payload):
    """Return the payload inside a ``{"data": ...}`` envelope, or ``payload`` itself."""
    if isinstance(payload, dict) and isinstance(payload.get('data'), (dict, list)):
        return payload['data']
    return payload


def envelope(data, message=None):
    body = {'data': data}
    if message:
        body['message'] = message
    return body
