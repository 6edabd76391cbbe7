"""
Tests for milestone reconciliation and the aggregate recompute.
"""
from datetime import date

from quest_api.db.crud import milestones as milestones_crud
from quest_api.db.crud import steps as steps_crud
from quest_api.journey.aggregator import recompute_totals
from quest_api.journey.constants import STEPS_PER_MILE
from quest_api.journey.reconciler import reconcile_milestones


def _set_steps(db, user, steps, day=date(2024, 3, 1)):
    steps_crud.upsert_step(
        db, user_id=user.id, recorded_date=day, step_count=steps, miles=steps / STEPS_PER_MILE, source="manual"
    )
    recompute_totals(db, user.id)
    db.commit()


def _ledger_names(db, user):
    return [um.milestone.name for um in milestones_crud.list_user_milestones(db, user_id=user.id)]


class TestReconcileMilestones:
    def test_records_every_passed_milestone(self, db_session, user):
        _set_steps(db_session, user, 140 * STEPS_PER_MILE)  # 140 miles, past Bree

        current = reconcile_milestones(db_session, user.id)

        assert current.name == "Bree"
        assert _ledger_names(db_session, user) == ["Bag End", "Bucklebury Ferry", "Bree"]
        db_session.refresh(user)
        assert user.current_milestone_id == current.id

    def test_exact_distance_counts_as_reached(self, db_session, user):
        _set_steps(db_session, user, 458 * STEPS_PER_MILE)
        assert reconcile_milestones(db_session, user.id).name == "Rivendell"

    def test_rerun_adds_nothing(self, db_session, user):
        _set_steps(db_session, user, 210 * STEPS_PER_MILE)
        reconcile_milestones(db_session, user.id)
        reconcile_milestones(db_session, user.id)
        assert len(_ledger_names(db_session, user)) == 4

    def test_downward_correction_keeps_ledger_but_moves_pointer(self, db_session, user):
        _set_steps(db_session, user, 500 * STEPS_PER_MILE)
        reconcile_milestones(db_session, user.id)

        _set_steps(db_session, user, 140 * STEPS_PER_MILE)
        current = reconcile_milestones(db_session, user.id)

        assert current.name == "Bree"
        assert "Rivendell" in _ledger_names(db_session, user)

    def test_missing_user_is_noop(self, db_session):
        import uuid
        assert reconcile_milestones(db_session, uuid.uuid4()) is None


class TestRecomputeTotals:
    def test_totals_follow_the_log(self, db_session, user):
        _set_steps(db_session, user, 3000, day=date(2024, 3, 1))
        _set_steps(db_session, user, 1000, day=date(2024, 3, 2))
        db_session.refresh(user)
        assert user.total_steps == 4000
        assert user.total_miles == 2.0

    def test_user_without_steps(self, db_session, user):
        assert recompute_totals(db_session, user.id) == (0, 0.0)
