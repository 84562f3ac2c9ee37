"""
Canonical entity model.

Victims, Cases, Evidence and Forensic Actions form a fixed two-level
foreign-key hierarchy:

    Victim -> Case -> {Evidence, ForensicAction}

Entities are immutable dataclasses. A ``Snapshot`` holds all four
collections at one point in time; every mutation produces a new snapshot.
"""
import enum
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Optional, Tuple


class EntityKind(enum.Enum):
    """The four entity collections."""
    VICTIM = 'victims'
    CASE = 'cases'
    EVIDENCE = 'evidence'
    ACTION = 'actions'

    @property
    def label(self):
        return _KIND_LABELS[self]


_KIND_LABELS = {
    EntityKind.VICTIM: 'Victim',
    EntityKind.CASE: 'Case',
    EntityKind.EVIDENCE: 'Evidence',
    EntityKind.ACTION: 'Forensic Action',
}


class ForensicStage(enum.Enum):
    """Stages of the digital forensics process."""
    IDENTIFICATION = 'identification'
    PRESERVATION = 'preservation'
    COLLECTION = 'collection'
    EXAMINATION = 'examination'
    ANALYSIS = 'analysis'
    PRESENTATION = 'presentation'

    @property
    def label(self):
        if self is ForensicStage.ANALYSIS:
            return 'Analysis / Documentation'
        return self.value.capitalize()


class ActionStatus(enum.Enum):
    """Forensic action status."""
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'

    @property
    def label(self):
        return self.value.replace('-', ' ').title()


# Case status is free text; these are the values offered by the forms.
CASE_STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('active', 'Active / Under Investigation'),
    ('completed', 'Completed'),
    ('closed', 'Closed'),
]
DEFAULT_CASE_STATUS = 'pending'
ACTIVE_CASE_STATUS = 'active'


@dataclass(frozen=True)
class Victim:
    id: int
    name: str
    contact: str = ''
    location: str = ''
    report_date: Optional[date] = None
    report_description: str = ''
    created_at: Optional[datetime] = None

    kind = EntityKind.VICTIM


@dataclass(frozen=True)
class Case:
    id: int
    victim_id: int
    case_type: str
    incident_date: Optional[date] = None
    summary: str = ''
    status: str = DEFAULT_CASE_STATUS
    created_at: Optional[datetime] = None

    kind = EntityKind.CASE


@dataclass(frozen=True)
class Evidence:
    id: int
    case_id: int
    evidence_type: str
    storage_location: str
    integrity_hash: str = ''
    collected_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    kind = EntityKind.EVIDENCE


@dataclass(frozen=True)
class ForensicAction:
    id: int
    case_id: int
    stage: ForensicStage
    description: str = ''
    person_in_charge: str = ''
    executed_at: Optional[datetime] = None
    status: ActionStatus = ActionStatus.PENDING
    created_at: Optional[datetime] = None

    kind = EntityKind.ACTION


ENTITY_CLASSES = {
    EntityKind.VICTIM: Victim,
    EntityKind.CASE: Case,
    EntityKind.EVIDENCE: Evidence,
    EntityKind.ACTION: ForensicAction,
}

# Foreign key of each kind: (attribute, parent kind)
PARENT_KEYS = {
    EntityKind.CASE: ('victim_id', EntityKind.VICTIM),
    EntityKind.EVIDENCE: ('case_id', EntityKind.CASE),
    EntityKind.ACTION: ('case_id', EntityKind.CASE),
}

# Fields that must be non-empty on create and update.
REQUIRED_FIELDS = {
    EntityKind.VICTIM: ('name',),
    EntityKind.CASE: ('victim_id', 'case_type'),
    EntityKind.EVIDENCE: ('case_id', 'evidence_type', 'storage_location'),
    EntityKind.ACTION: ('case_id', 'stage'),
}

IMMUTABLE_FIELDS = ('id', 'created_at')


def entity_field_names(kind):
    """Names of all dataclass fields of ``kind``."""
    return [f.name for f in fields(ENTITY_CLASSES[kind])]


def editable_field_names(kind):
    """Field names that create/update input may set."""
    return [name for name in entity_field_names(kind) if name not in IMMUTABLE_FIELDS]


def child_kinds(kind):
    """Kinds whose foreign key points at ``kind``."""
    return [child for child, (_, parent) in PARENT_KEYS.items() if parent is kind]


def to_dict(entity):
    """Plain dict of an entity's fields."""
    return {f.name: getattr(entity, f.name) for f in fields(entity)}


@dataclass(frozen=True)
class Snapshot:
    """All four collections at one point in time, in insertion order."""
    victims: Tuple[Victim, ...] = field(default_factory=tuple)
    cases: Tuple[Case, ...] = field(default_factory=tuple)
    evidence: Tuple[Evidence, ...] = field(default_factory=tuple)
    actions: Tuple[ForensicAction, ...] = field(default_factory=tuple)

    def collection(self, kind):
        return getattr(self, kind.value)

    def with_collection(self, kind, items):
        return replace(self, **{kind.value: tuple(items)})

    def find(self, kind, entity_id):
        for entity in self.collection(kind):
            if entity.id == entity_id:
                return entity
        return None

    def ids(self, kind):
        return {entity.id for entity in self.collection(kind)}

    def counts(self):
        return {kind.value: len(self.collection(kind)) for kind in EntityKind}

    def __len__(self):
        return sum(len(self.collection(kind)) for kind in EntityKind)
