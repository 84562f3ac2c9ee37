"""
Tests for the relational integrity rules (cascading deletes, orphans).
"""
import pytest
from digforweb.models.entities import Case, EntityKind, Evidence
from digforweb.services.cascade import (
    EMPTY_PLAN, apply_deletion, delete_cascade, find_orphans, plan_deletion
)


@pytest.mark.unit
class TestPlanDeletion:
    """Tests for plan_deletion."""

    def test_victim_cascades_to_cases_evidence_and_actions(self, snapshot):
        plan = plan_deletion(snapshot, EntityKind.VICTIM, 1)

        assert plan.victims == {1}
        assert plan.cases == {1, 2}
        assert plan.evidence == {1, 2}
        assert plan.actions == {1, 2}
        assert plan.total == 7

    def test_case_cascades_to_its_own_children_only(self, snapshot):
        plan = plan_deletion(snapshot, EntityKind.CASE, 3)

        assert plan.victims == set()
        assert plan.cases == {3}
        assert plan.evidence == {3}
        assert plan.actions == set()

    def test_case_without_dependents(self, snapshot):
        plan = plan_deletion(snapshot, EntityKind.CASE, 2)

        assert plan.counts() == {'victims': 0, 'cases': 1, 'evidence': 0, 'actions': 0}

    def test_evidence_and_action_are_leaves(self, snapshot):
        assert plan_deletion(snapshot, EntityKind.EVIDENCE, 2).total == 1
        assert plan_deletion(snapshot, EntityKind.ACTION, 1).actions == {1}

    def test_absent_target_gives_empty_plan(self, snapshot):
        plan = plan_deletion(snapshot, EntityKind.VICTIM, 99)

        assert plan.is_empty
        assert plan == EMPTY_PLAN


@pytest.mark.unit
class TestApplyDeletion:
    """Tests for apply_deletion and delete_cascade."""

    def test_delete_victim_leaves_other_victim_untouched(self, snapshot):
        result, plan = delete_cascade(snapshot, EntityKind.VICTIM, 1)

        assert [v.id for v in result.victims] == [2]
        assert [c.id for c in result.cases] == [3]
        assert [e.id for e in result.evidence] == [3]
        assert result.actions == ()
        assert find_orphans(result) == {}

    def test_delete_case_keeps_victim(self, snapshot):
        result, _ = delete_cascade(snapshot, EntityKind.CASE, 1)

        assert len(result.victims) == 2
        assert [c.id for c in result.cases] == [2, 3]
        assert [e.id for e in result.evidence] == [3]
        assert result.actions == ()

    def test_original_snapshot_is_not_modified(self, snapshot):
        delete_cascade(snapshot, EntityKind.VICTIM, 1)

        assert len(snapshot) == 10

    def test_empty_plan_returns_same_snapshot(self, snapshot):
        assert apply_deletion(snapshot, EMPTY_PLAN) is snapshot

    def test_insertion_order_preserved(self, snapshot):
        result, _ = delete_cascade(snapshot, EntityKind.EVIDENCE, 2)

        assert [e.id for e in result.evidence] == [1, 3]


@pytest.mark.unit
class TestFindOrphans:
    """Tests for find_orphans."""

    def test_consistent_snapshot_has_no_orphans(self, snapshot):
        assert find_orphans(snapshot) == {}

    def test_detects_dangling_foreign_keys(self, snapshot):
        broken = snapshot.with_collection(
            EntityKind.CASE, snapshot.cases + (Case(id=9, victim_id=42, case_type='Fraud'),)
        ).with_collection(
            EntityKind.EVIDENCE,
            snapshot.evidence + (Evidence(id=8, case_id=77, evidence_type='USB', storage_location='L1'),)
        )

        assert find_orphans(broken) == {'cases': [9], 'evidence': [8]}
