import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Enum
from sqlalchemy.orm import relationship

from app.database.database import Base


class FriendshipStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Friendship(Base):
    """
    A single directed row per pair of users.
    The requester/receiver direction is fixed when the request is sent.
    """
    __tablename__ = "friendships"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(FriendshipStatus, native_enum=False, length=20, name="friendship_status"),
        nullable=False,
        default=FriendshipStatus.PENDING,
    )
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    requester = relationship("User", foreign_keys=[requester_id], back_populates="sent_friend_requests")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="received_friend_requests")

    __table_args__ = (
        UniqueConstraint("requester_id", "receiver_id", name="unique_friendship"),
        CheckConstraint("requester_id <> receiver_id", name="friendship_not_self"),
    )
