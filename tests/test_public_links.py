import pytest
from conftest import at

from journeyhub.audit import repo as audit_repo
from journeyhub.audit.models import REVOKE_PUBLIC_LINK
from journeyhub.core import exceptions as exc
from journeyhub.links import repo as links_repo
from journeyhub.links.models import JourneyPublicLink
from journeyhub.links.service import (
    consume_public_link,
    create_public_link,
    revoke_public_link,
)


@pytest.fixture
def journey(make_user, make_journey):
    user = make_user("owner")
    return make_journey(user.id, at(10, 8), at(10, 9))


def test_create_requires_existing_journey(db):
    with pytest.raises(exc.NotFoundError) as e:
        create_public_link(db, "missing")
    assert e.value.message == exc.JOURNEY_NOT_FOUND


def test_create_is_idempotent_while_active(db, journey):
    first = create_public_link(db, journey.id)
    second = create_public_link(db, journey.id)

    assert first.token == second.token
    assert first.url == f"/api/journeys/public/{first.token}"
    assert db.query(JourneyPublicLink).count() == 1


def test_consume_returns_journey_once(db, journey):
    link = create_public_link(db, journey.id)

    resolved = consume_public_link(db, link.token)
    assert resolved.id == journey.id

    with pytest.raises(exc.GoneError):
        consume_public_link(db, link.token)


def test_consume_unknown_token_is_not_found(db):
    with pytest.raises(exc.NotFoundError) as e:
        consume_public_link(db, "no-such-token")
    assert e.value.message == exc.PUBLIC_LINK_NOT_FOUND


def test_consume_when_journey_is_gone_is_not_found(db, journey):
    # Orphaned link row, as left behind by a store without cascades
    db.add(JourneyPublicLink(journey_id="deleted-journey", token="orphan"))
    db.commit()

    with pytest.raises(exc.NotFoundError) as e:
        consume_public_link(db, "orphan")
    assert e.value.message == exc.JOURNEY_NOT_FOUND


def test_new_link_after_consumption(db, journey):
    first = create_public_link(db, journey.id)
    consume_public_link(db, first.token)

    second = create_public_link(db, journey.id)

    assert second.token != first.token
    assert db.query(JourneyPublicLink).count() == 2


def test_revoke_marks_link_and_writes_audit(db, journey):
    link = create_public_link(db, journey.id)

    revoke_public_link(db, journey.id, "acting-user")

    stored = links_repo.find_by_token(db, link.token)
    assert stored.is_revoked is True
    assert stored.revoked_at is not None
    entries = audit_repo.list_for_target(db, stored.id)
    assert len(entries) == 1
    assert entries[0].action_type == REVOKE_PUBLIC_LINK
    assert entries[0].user_id == "acting-user"


def test_revoke_twice_is_gone_not_not_found(db, journey):
    create_public_link(db, journey.id)
    revoke_public_link(db, journey.id, "acting-user")

    with pytest.raises(exc.GoneError):
        revoke_public_link(db, journey.id, "acting-user")


def test_revoke_after_consumption_is_gone(db, journey):
    link = create_public_link(db, journey.id)
    consume_public_link(db, link.token)

    with pytest.raises(exc.GoneError):
        revoke_public_link(db, journey.id, "acting-user")


def test_consume_after_revoke_is_gone(db, journey):
    link = create_public_link(db, journey.id)
    revoke_public_link(db, journey.id, "acting-user")

    with pytest.raises(exc.GoneError):
        consume_public_link(db, link.token)


def test_revoke_without_link_is_not_found(db, journey):
    with pytest.raises(exc.NotFoundError) as e:
        revoke_public_link(db, journey.id, "acting-user")
    assert e.value.message == exc.PUBLIC_LINK_NOT_FOUND


def test_revoke_unknown_journey_is_not_found(db):
    with pytest.raises(exc.NotFoundError) as e:
        revoke_public_link(db, "missing", "acting-user")
    assert e.value.message == exc.JOURNEY_NOT_FOUND


def test_compare_and_swap_only_flips_once(db, journey):
    create_public_link(db, journey.id)
    link = links_repo.find_active_by_journey(db, journey.id)

    assert links_repo.mark_revoked_if_active(db, link) is True
    assert links_repo.mark_revoked_if_active(db, link) is False
