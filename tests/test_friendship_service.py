from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.api.friendships.models import Friendship, FriendshipStatus
from app.api.friendships.service import FriendshipService
from app.core.exceptions import (
    ConflictError, InvalidArgumentError, InvalidStateError, NotFoundError, NotReceiverError
)
from app.core.pagination import PageRequest
from app.database.database import Base
from conftest import make_user


@pytest.fixture
def service(db):
    return FriendshipService(db)


def accepted(db, requester, receiver):
    friendship = Friendship(
        requester_id=requester.id,
        receiver_id=receiver.id,
        status=FriendshipStatus.ACCEPTED,
        created_at=datetime.now(timezone.utc),
    )
    db.add(friendship)
    db.commit()
    return friendship


def first_page(size=5):
    return PageRequest(page=0, size=size)


class TestSendFriendRequest:

    def test_creates_pending_request(self, service, alice, bob):
        response = service.send_friend_request(alice.id, bob.id)

        assert response.status == FriendshipStatus.PENDING
        assert response.requester.id == alice.id
        assert response.receiver.id == bob.id
        assert response.requester.username == "alice"

    def test_sets_created_at_and_leaves_updated_at_empty(self, service, db, alice, bob):
        response = service.send_friend_request(alice.id, bob.id)

        friendship = db.get(Friendship, response.id)
        assert friendship.created_at is not None
        assert friendship.updated_at is None

    def test_self_request_is_rejected(self, service, alice):
        with pytest.raises(InvalidArgumentError):
            service.send_friend_request(alice.id, alice.id)

    def test_unknown_requester(self, service, bob):
        with pytest.raises(NotFoundError):
            service.send_friend_request(999, bob.id)

    def test_unknown_receiver(self, service, alice):
        with pytest.raises(NotFoundError):
            service.send_friend_request(alice.id, 999)

    def test_repeated_request_conflicts(self, service, alice, bob):
        service.send_friend_request(alice.id, bob.id)

        with pytest.raises(ConflictError):
            service.send_friend_request(alice.id, bob.id)

    def test_reverse_request_conflicts(self, service, alice, bob):
        service.send_friend_request(alice.id, bob.id)

        with pytest.raises(ConflictError):
            service.send_friend_request(bob.id, alice.id)

    def test_request_after_rejection_stays_blocked(self, service, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)
        service.reject_friend_request(sent.id, bob.id)

        with pytest.raises(ConflictError):
            service.send_friend_request(alice.id, bob.id)
        with pytest.raises(ConflictError):
            service.send_friend_request(bob.id, alice.id)

    def test_only_one_row_per_pair(self, service, db, alice, bob):
        service.send_friend_request(alice.id, bob.id)
        with pytest.raises(ConflictError):
            service.send_friend_request(bob.id, alice.id)

        assert db.query(Friendship).count() == 1


class TestRespondToFriendRequest:

    def test_receiver_accepts(self, service, db, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)

        response = service.accept_friend_request(sent.id, bob.id)

        assert response.status == FriendshipStatus.ACCEPTED
        friendship = db.get(Friendship, sent.id)
        assert friendship.updated_at is not None
        assert friendship.updated_at > friendship.created_at

    def test_receiver_rejects(self, service, db, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)

        response = service.reject_friend_request(sent.id, bob.id)

        assert response.status == FriendshipStatus.REJECTED
        assert db.get(Friendship, sent.id).updated_at is not None

    def test_requester_cannot_accept(self, service, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)

        with pytest.raises(NotReceiverError):
            service.accept_friend_request(sent.id, alice.id)

    def test_third_party_cannot_accept(self, service, alice, bob, carol):
        sent = service.send_friend_request(alice.id, bob.id)

        with pytest.raises(NotReceiverError):
            service.accept_friend_request(sent.id, carol.id)

    def test_third_party_cannot_reject(self, service, alice, bob, carol):
        sent = service.send_friend_request(alice.id, bob.id)

        with pytest.raises(NotReceiverError):
            service.reject_friend_request(sent.id, carol.id)

    def test_forbidden_leaves_request_pending(self, service, db, alice, bob, carol):
        sent = service.send_friend_request(alice.id, bob.id)
        with pytest.raises(NotReceiverError):
            service.accept_friend_request(sent.id, carol.id)

        friendship = db.get(Friendship, sent.id)
        assert friendship.status == FriendshipStatus.PENDING
        assert friendship.updated_at is None

    def test_unknown_friendship(self, service, bob):
        with pytest.raises(NotFoundError):
            service.accept_friend_request(12345, bob.id)
        with pytest.raises(NotFoundError):
            service.reject_friend_request(12345, bob.id)

    @pytest.mark.parametrize("first", ["accept", "reject"])
    @pytest.mark.parametrize("second", ["accept", "reject"])
    def test_terminal_states_cannot_change(self, service, alice, bob, first, second):
        sent = service.send_friend_request(alice.id, bob.id)
        getattr(service, f"{first}_friend_request")(sent.id, bob.id)

        with pytest.raises(InvalidStateError):
            getattr(service, f"{second}_friend_request")(sent.id, bob.id)

    def test_status_checked_before_actor(self, service, alice, bob, carol):
        sent = service.send_friend_request(alice.id, bob.id)
        service.accept_friend_request(sent.id, bob.id)

        with pytest.raises(InvalidStateError):
            service.accept_friend_request(sent.id, carol.id)


class TestGetStatus:

    def test_none_without_relationship(self, service, alice, bob):
        status = service.get_status(alice.id, bob.id)

        assert status.status == "NONE"
        assert status.friendship_id is None
        assert status.requester_id is None
        assert status.receiver_id is None

    def test_is_symmetric(self, service, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)

        forward = service.get_status(alice.id, bob.id)
        backward = service.get_status(bob.id, alice.id)

        assert forward == backward
        assert forward.status == "PENDING"
        assert forward.friendship_id == sent.id
        assert forward.requester_id == alice.id
        assert forward.receiver_id == bob.id

    def test_reflects_transition(self, service, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)
        service.reject_friend_request(sent.id, bob.id)

        assert service.get_status(bob.id, alice.id).status == "REJECTED"


class TestGetFriends:

    def test_accepted_request_makes_both_sides_friends(self, service, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)
        service.accept_friend_request(sent.id, bob.id)

        assert [u.id for u in service.get_friends(alice.id, first_page()).content] == [bob.id]
        assert [u.id for u in service.get_friends(bob.id, first_page()).content] == [alice.id]

    def test_pending_and_rejected_are_not_friends(self, service, alice, bob, carol):
        service.send_friend_request(alice.id, bob.id)
        rejected = service.send_friend_request(carol.id, alice.id)
        service.reject_friend_request(rejected.id, alice.id)

        page = service.get_friends(alice.id, first_page())

        assert page.content == []
        assert page.total_elements == 0

    def test_sent_side_comes_before_received_side(self, service, db, alice, bob, carol):
        dave = make_user(db, "dave")
        received = service.send_friend_request(bob.id, alice.id)
        service.accept_friend_request(received.id, alice.id)
        sent_to_carol = service.send_friend_request(alice.id, carol.id)
        service.accept_friend_request(sent_to_carol.id, carol.id)
        sent_to_dave = service.send_friend_request(alice.id, dave.id)
        service.accept_friend_request(sent_to_dave.id, dave.id)

        friends = service.get_friends(alice.id, first_page()).content

        assert [u.username for u in friends] == ["carol", "dave", "bob"]

    def test_paginates_in_memory(self, service, db, alice):
        for name in ("u1", "u2", "u3"):
            other = make_user(db, name)
            sent = service.send_friend_request(alice.id, other.id)
            service.accept_friend_request(sent.id, other.id)

        page = service.get_friends(alice.id, PageRequest(page=1, size=2))

        assert [u.username for u in page.content] == ["u3"]
        assert page.total_elements == 3
        assert page.total_pages == 2

    def test_offset_past_end_returns_empty_page(self, service, alice, bob):
        sent = service.send_friend_request(alice.id, bob.id)
        service.accept_friend_request(sent.id, bob.id)

        page = service.get_friends(alice.id, PageRequest(page=3, size=5))

        assert page.content == []
        assert page.total_elements == 1

    def test_friend_in_both_directions_is_listed_once(self, service, db, alice, bob):
        accepted(db, alice, bob)
        accepted(db, bob, alice)

        page = service.get_friends(alice.id, first_page())

        assert [u.id for u in page.content] == [bob.id]
        assert page.total_elements == 1

    def test_duplicate_keeps_sent_side_position(self, service, db, alice, bob, carol):
        accepted(db, carol, alice)
        accepted(db, bob, alice)
        accepted(db, alice, bob)

        friends = service.get_friends(alice.id, first_page()).content

        assert [u.username for u in friends] == ["bob", "carol"]

    def test_unknown_sort_field(self, service, alice):
        with pytest.raises(InvalidArgumentError):
            service.get_friends(alice.id, PageRequest(sort="password,asc"))


class TestRequestLists:

    def test_incoming_requests_only_pending(self, service, alice, bob, carol):
        service.send_friend_request(alice.id, carol.id)
        accepted = service.send_friend_request(bob.id, carol.id)
        service.accept_friend_request(accepted.id, carol.id)

        page = service.get_incoming_friend_requests(carol.id, first_page())

        assert [f.requester_id for f in page.content] == [alice.id]
        assert page.total_elements == 1

    def test_outgoing_requests_only_pending(self, service, alice, bob, carol):
        service.send_friend_request(alice.id, bob.id)
        rejected = service.send_friend_request(alice.id, carol.id)
        service.reject_friend_request(rejected.id, carol.id)

        page = service.get_outgoing_friend_requests(alice.id, first_page())

        assert [f.receiver_id for f in page.content] == [bob.id]

    def test_incoming_requests_sorted_newest_first(self, service, db, alice):
        for name in ("u1", "u2", "u3"):
            other = make_user(db, name)
            service.send_friend_request(other.id, alice.id)

        page = service.get_incoming_friend_requests(alice.id, PageRequest(page=0, size=2))

        assert [f.requester.username for f in page.content] == ["u3", "u2"]
        assert page.total_elements == 3

    def test_unknown_sort_field(self, service, alice):
        with pytest.raises(InvalidArgumentError):
            service.get_incoming_friend_requests(alice.id, PageRequest(sort="password,asc"))

    def test_all_relations_any_status(self, service, alice, bob, carol):
        first = service.send_friend_request(alice.id, bob.id)
        service.accept_friend_request(first.id, bob.id)
        service.send_friend_request(carol.id, alice.id)

        relations = service.get_friendships_all_relations(alice.id)

        assert [f.status for f in relations] == [FriendshipStatus.ACCEPTED, FriendshipStatus.PENDING]
        assert service.get_friendships_all_relations(999) == []


class TestConcurrentResponses:

    @pytest.fixture
    def sessions(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'friendships.db'}",
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(bind=engine)
        factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        first, second = factory(), factory()
        yield first, second
        first.close()
        second.close()
        engine.dispose()

    @pytest.mark.parametrize("verb", ["accept", "reject"])
    def test_second_response_sees_first_one(self, sessions, verb):
        first, second = sessions
        alice = make_user(first, "alice")
        bob = make_user(first, "bob")
        sent = FriendshipService(first).send_friend_request(alice.id, bob.id)

        # second session already holds the PENDING row
        stale = second.get(Friendship, sent.id)
        assert stale.status == FriendshipStatus.PENDING

        FriendshipService(first).accept_friend_request(sent.id, bob.id)

        with pytest.raises(InvalidStateError):
            getattr(FriendshipService(second), f"{verb}_friend_request")(sent.id, bob.id)
        assert second.get(Friendship, sent.id).status == FriendshipStatus.ACCEPTED
