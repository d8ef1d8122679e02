import pytest
from conftest import at

from journeyhub.audit.models import AuditLog, SHARE_JOURNEY
from journeyhub.core import exceptions as exc
from journeyhub.shares import repo as shares_repo
from journeyhub.shares.models import JourneyShare
from journeyhub.shares.service import share_journey


@pytest.fixture
def journey(make_user, make_journey):
    user = make_user("owner")
    return make_journey(user.id, at(10, 8), at(10, 9))


def test_share_unknown_journey_is_not_found(db):
    with pytest.raises(exc.NotFoundError):
        share_journey(db, "missing", "owner", ["r1"])


def test_share_creates_share_and_audit_per_recipient(db, journey):
    result = share_journey(db, journey.id, journey.user_id, ["r1", "r2"])

    assert result.shared_with_user_ids == ["r1", "r2"]
    assert len(result.created_share_ids) == 2

    shares = shares_repo.list_all(db)
    assert {s.receiving_user_id for s in shares} == {"r1", "r2"}
    assert all(s.shared_by_user_id == journey.user_id for s in shares)

    audits = db.query(AuditLog).filter(AuditLog.action_type == SHARE_JOURNEY).all()
    assert {a.target_id for a in audits} == set(result.created_share_ids)


def test_resharing_same_recipient_is_a_silent_skip(db, journey):
    first = share_journey(db, journey.id, journey.user_id, ["r1"])
    second = share_journey(db, journey.id, journey.user_id, ["r1"])

    assert first.shared_with_user_ids == ["r1"]
    assert second.shared_with_user_ids == []
    assert second.created_share_ids == []
    assert db.query(JourneyShare).count() == 1
    assert db.query(AuditLog).count() == 1


def test_duplicate_recipients_in_one_call(db, journey):
    result = share_journey(db, journey.id, journey.user_id, ["r1", "r1", "r2"])

    assert result.shared_with_user_ids == ["r1", "r2"]
    assert db.query(JourneyShare).count() == 2


def test_revoked_share_does_not_block_resharing(db, journey):
    share_journey(db, journey.id, journey.user_id, ["r1"])
    share = shares_repo.find_active(db, journey.id, "r1")
    share.is_revoked = True
    db.commit()

    result = share_journey(db, journey.id, journey.user_id, ["r1"])

    assert result.shared_with_user_ids == ["r1"]
    assert db.query(JourneyShare).count() == 2


def test_empty_recipient_list_writes_nothing(db, journey):
    result = share_journey(db, journey.id, journey.user_id, [])

    assert result.created_share_ids == []
    assert result.shared_with_user_ids == []
    assert db.query(JourneyShare).count() == 0
    assert db.query(AuditLog).count() == 0


def test_partial_failure_keeps_earlier_recipients(db, journey, monkeypatch):
    from journeyhub.shares import service

    real_find_active = shares_repo.find_active

    def flaky_find_active(session, journey_id, recipient_id):
        if recipient_id == "boom":
            raise RuntimeError("storage down")
        return real_find_active(session, journey_id, recipient_id)

    monkeypatch.setattr(service.repo, "find_active", flaky_find_active)

    with pytest.raises(RuntimeError):
        share_journey(db, journey.id, journey.user_id, ["r1", "boom", "r2"])

    assert [s.receiving_user_id for s in shares_repo.list_all(db)] == ["r1"]

    monkeypatch.setattr(service.repo, "find_active", real_find_active)
    retry = share_journey(db, journey.id, journey.user_id, ["r1", "r2"])
    assert retry.shared_with_user_ids == ["r2"]
