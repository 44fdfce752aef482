import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.friendships.models import Friendship, FriendshipStatus
from app.api.friendships.schemas import FriendshipResponse, FriendshipStatusResponse
from app.api.users.models import User
from app.core.exceptions import (
    ConflictError, InvalidArgumentError, InvalidStateError, NotFoundError, NotReceiverError
)
from app.core.pagination import Page, PageRequest, paginate

SORTABLE = {
    "id": Friendship.id,
    "createdAt": Friendship.created_at,
    "updatedAt": Friendship.updated_at,
    "status": Friendship.status,
}


class FriendshipService:
    """
    Sends, accepts and rejects friend requests and builds the views derived from them.

    One row exists per pair of users. The row keeps the direction it was created
    with, so every "between a and b" lookup has to check both directions.
    """

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    def send_friend_request(self, requester_id: int, receiver_id: int) -> FriendshipResponse:
        self.logger.info("Sending friend request from user %s to user %s", requester_id, receiver_id)
        requester = self._get_user(requester_id, "Requester does not exist")
        receiver = self._get_user(receiver_id, "Receiver does not exist")

        if requester_id == receiver_id:
            self.logger.warning("User %s tried to send a friend request to themselves", requester_id)
            raise InvalidArgumentError("A user cannot send a friend request to themselves")

        # Any existing row blocks a new request, including a REJECTED one
        if self._exists(requester_id, receiver_id) or self._exists(receiver_id, requester_id):
            self.logger.warning("Friendship already exists between users %s and %s", requester_id, receiver_id)
            raise ConflictError("A friend request already exists between these users")

        friendship = Friendship(
            requester=requester,
            receiver=receiver,
            status=FriendshipStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(friendship)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            self.logger.warning("Concurrent friend request between users %s and %s", requester_id, receiver_id)
            raise ConflictError("A friend request already exists between these users")
        self.db.refresh(friendship)

        self.logger.info("Friend request %s sent", friendship.id)
        return FriendshipResponse.model_validate(friendship)

    def accept_friend_request(self, friendship_id: int, user_id: int) -> FriendshipResponse:
        self.logger.info("Accepting friend request %s", friendship_id)
        return self._respond(friendship_id, user_id, FriendshipStatus.ACCEPTED, "accept")

    def reject_friend_request(self, friendship_id: int, user_id: int) -> FriendshipResponse:
        self.logger.info("Rejecting friend request %s", friendship_id)
        return self._respond(friendship_id, user_id, FriendshipStatus.REJECTED, "reject")

    def get_incoming_friend_requests(self, user_id: int, page_request: PageRequest) -> Page:
        self.logger.info("Fetching incoming friend requests for user %s (%s)", user_id, page_request)
        query = self.db.query(Friendship).filter(
            Friendship.receiver_id == user_id,
            Friendship.status == FriendshipStatus.PENDING
        )
        return paginate(query, page_request, SORTABLE)

    def get_outgoing_friend_requests(self, user_id: int, page_request: PageRequest) -> Page:
        self.logger.info("Fetching outgoing friend requests for user %s (%s)", user_id, page_request)
        query = self.db.query(Friendship).filter(
            Friendship.requester_id == user_id,
            Friendship.status == FriendshipStatus.PENDING
        )
        return paginate(query, page_request, SORTABLE)

    def get_friends(self, user_id: int, page_request: PageRequest) -> Page:
        """
        Users with an ACCEPTED friendship to user_id in either direction.

        Friends from requests the user sent come first, then friends from requests
        the user received; duplicates keep their first position. The page is cut
        from that list in memory. The sort is validated like the other listings
        but never reorders friends.
        """
        self.logger.info("Fetching friends for user %s (%s)", user_id, page_request)
        field, _ = page_request.sort_order()
        if field not in SORTABLE:
            raise InvalidArgumentError(f"Cannot sort by '{field}'")

        requested = self.db.query(Friendship).filter(
            Friendship.requester_id == user_id,
            Friendship.status == FriendshipStatus.ACCEPTED
        ).order_by(Friendship.id).all()
        received = self.db.query(Friendship).filter(
            Friendship.receiver_id == user_id,
            Friendship.status == FriendshipStatus.ACCEPTED
        ).order_by(Friendship.id).all()

        friends: List[User] = []
        seen = set()
        for friendship in requested + received:
            other = friendship.receiver if friendship.requester_id == user_id else friendship.requester
            if other.id in seen:
                continue
            seen.add(other.id)
            friends.append(other)

        if page_request.offset >= len(friends):
            self.logger.debug(
                "Page start %s >= friend count %s for user %s", page_request.offset, len(friends), user_id
            )

        page = Page.from_list(friends, page_request)
        self.logger.info(
            "Returning %s of %s friends for user %s", len(page.content), page.total_elements, user_id
        )
        return page

    def get_friendships_all_relations(self, user_id: int) -> List[Friendship]:
        self.logger.info("Fetching all friendships for user %s", user_id)
        friendships = self.db.query(Friendship).filter(
            or_(Friendship.requester_id == user_id, Friendship.receiver_id == user_id)
        ).order_by(Friendship.id).all()
        self.logger.debug("Found %s friendships for user %s", len(friendships), user_id)
        return friendships

    def get_status(self, current_user_id: int, other_user_id: int) -> FriendshipStatusResponse:
        self.logger.info("Fetching friendship status between users %s and %s", current_user_id, other_user_id)
        friendship = self._find_between(current_user_id, other_user_id)
        if not friendship:
            result = FriendshipStatusResponse(status="NONE")
        else:
            result = FriendshipStatusResponse(
                status=friendship.status.value,
                friendship_id=friendship.id,
                requester_id=friendship.requester_id,
                receiver_id=friendship.receiver_id,
            )
        self.logger.debug("Status between users %s and %s: %s", current_user_id, other_user_id, result)
        return result

    def _respond(self, friendship_id: int, user_id: int, target: FriendshipStatus, verb: str) -> FriendshipResponse:
        # Row stays locked until commit or rollback
        friendship = self.db.query(Friendship).filter(
            Friendship.id == friendship_id
        ).with_for_update().populate_existing().first()
        if not friendship:
            self.db.rollback()
            raise NotFoundError("Friend request does not exist")

        if friendship.status != FriendshipStatus.PENDING:
            self.logger.warning(
                "Friend request %s is not pending (status=%s)", friendship_id, friendship.status.value
            )
            self.db.rollback()
            raise InvalidStateError(f"Only pending friend requests can be {verb}ed")

        if friendship.receiver_id != user_id:
            self.logger.warning("User %s is not the receiver of friend request %s", user_id, friendship_id)
            self.db.rollback()
            raise NotReceiverError(f"Only the receiver can {verb} the friend request")

        friendship.status = target
        friendship.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(friendship)

        self.logger.info("Friend request %s is now %s", friendship_id, target.value)
        return FriendshipResponse.model_validate(friendship)

    def _get_user(self, user_id: int, message: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            self.logger.warning("User %s not found", user_id)
            raise NotFoundError(message)
        return user

    def _exists(self, requester_id: int, receiver_id: int) -> bool:
        return self.db.query(Friendship.id).filter(
            Friendship.requester_id == requester_id,
            Friendship.receiver_id == receiver_id
        ).first() is not None

    def _find_between(self, user_a_id: int, user_b_id: int) -> Optional[Friendship]:
        return self.db.query(Friendship).filter(
            or_(
                and_(Friendship.requester_id == user_a_id, Friendship.receiver_id == user_b_id),
                and_(Friendship.requester_id == user_b_id, Friendship.receiver_id == user_a_id)
            )
        ).first()
