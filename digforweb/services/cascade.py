"""
Relational integrity rules.

Deleting a Victim removes its Cases and, transitively, the Evidence and
Forensic Actions of those Cases. Deleting a Case removes its Evidence and
Actions. The functions here are pure: they take a full ``Snapshot`` and
return the ids to remove or the next snapshot, so a cascade is applied in
one step or not at all.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import FrozenSet

from digforweb.models.entities import EntityKind, PARENT_KEYS, child_kinds


@dataclass(frozen=True)
class DeletionPlan:
    """Ids removed by a delete, grouped by kind (target included)."""
    victims: FrozenSet[int] = field(default_factory=frozenset)
    cases: FrozenSet[int] = field(default_factory=frozenset)
    evidence: FrozenSet[int] = field(default_factory=frozenset)
    actions: FrozenSet[int] = field(default_factory=frozenset)

    def ids(self, kind):
        return getattr(self, kind.value)

    @property
    def is_empty(self):
        return self.total == 0

    @property
    def total(self):
        return sum(len(self.ids(kind)) for kind in EntityKind)

    def counts(self):
        return {kind.value: len(self.ids(kind)) for kind in EntityKind}


EMPTY_PLAN = DeletionPlan()


def plan_deletion(snapshot, kind, entity_id):
    """
    Compute everything removed by deleting ``kind`` #``entity_id``.

    Breadth-first walk down the FK hierarchy. FKs only point upwards, so
    the walk terminates after two levels. An absent target gives an empty
    plan.

    Args:
        snapshot: Current ``Snapshot``
        kind: ``EntityKind`` of the deletion target
        entity_id: Identifier of the target

    Returns:
        DeletionPlan
    """
    if snapshot.find(kind, entity_id) is None:
        return EMPTY_PLAN

    removed = {k: set() for k in EntityKind}
    removed[kind].add(entity_id)
    queue = deque([(kind, entity_id)])

    while queue:
        parent_kind, parent_id = queue.popleft()
        for child_kind in child_kinds(parent_kind):
            fk_attr, _ = PARENT_KEYS[child_kind]
            for child in snapshot.collection(child_kind):
                if getattr(child, fk_attr) == parent_id and child.id not in removed[child_kind]:
                    removed[child_kind].add(child.id)
                    queue.append((child_kind, child.id))

    return DeletionPlan(**{k.value: frozenset(ids) for k, ids in removed.items()})


def apply_deletion(snapshot, plan):
    """Return ``snapshot`` without any entity listed in ``plan``."""
    if plan.is_empty:
        return snapshot
    result = snapshot
    for kind in EntityKind:
        doomed = plan.ids(kind)
        if doomed:
            result = result.with_collection(
                kind, [e for e in result.collection(kind) if e.id not in doomed]
            )
    return result


def delete_cascade(snapshot, kind, entity_id):
    """Plan and apply a cascading delete; returns ``(next_snapshot, plan)``."""
    plan = plan_deletion(snapshot, kind, entity_id)
    return apply_deletion(snapshot, plan), plan


def find_orphans(snapshot):
    """
    Entities whose foreign key does not resolve.

    Returns:
        dict: kind value -> list of orphaned ids (only kinds with orphans)
    """
    orphans = {}
    for child_kind, (fk_attr, parent_kind) in PARENT_KEYS.items():
        parent_ids = snapshot.ids(parent_kind)
        missing = [
            entity.id for entity in snapshot.collection(child_kind)
            if getattr(entity, fk_attr) not in parent_ids
        ]
        if missing:
            orphans[child_kind.value] = missing
    return orphans
