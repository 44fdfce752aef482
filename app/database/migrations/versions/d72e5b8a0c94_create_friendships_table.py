"""create friendships table

Revision ID: d72e5b8a0c94
Revises: a3f9c1d47e58
Create Date: 2026-10-12 10:21:37.881902

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = 'd72e5b8a0c94'
down_revision: Union[str, Sequence[str], None] = 'a3f9c1d47e58'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "friendships",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("requester_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
                  index=True),
        sa.Column("receiver_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
                  index=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("requester_id", "receiver_id", name="unique_friendship"),
        sa.CheckConstraint("requester_id <> receiver_id", name="friendship_not_self"),
    )


def downgrade() -> None:
    op.drop_table("friendships")
