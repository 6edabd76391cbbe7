from quest_api.db.models.achievement import Achievement
from quest_api.db.models.milestone import Milestone
from quest_api.db.seed import seed_reference_data


def test_seed_is_idempotent(db_session):
    assert seed_reference_data(db_session) == (0, 0)
    assert db_session.query(Milestone).count() == 20
    assert db_session.query(Achievement).count() == 13


def test_road_ends_at_mount_doom(db_session):
    last = db_session.query(Milestone).order_by(Milestone.order_index.desc()).first()
    assert last.name == "Mount Doom"
    assert last.distance_from_start == 1779
