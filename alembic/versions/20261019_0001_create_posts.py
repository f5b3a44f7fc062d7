"""Create posts table.

Revision ID: 0001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the posts table."""
    op.create_table(
        "posts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(255), nullable=False, index=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        # Blob key, never a public URL
        sa.Column("image_key", sa.String(512), nullable=True),
        sa.Column(
            "category",
            sa.Enum(
                "Email Marketing",
                "SEO & Analytics",
                "Web Development",
                "E-commerce",
                name="postcategory",
                native_enum=False,
                length=50,
            ),
            nullable=True,
            index=True,
        ),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.false()),
        # Timestamps
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_index("ix_posts_owner_created", "posts", ["owner_id", "created_at"])


def downgrade() -> None:
    """Drop the posts table."""
    op.drop_index("ix_posts_owner_created", table_name="posts")
    op.drop_table("posts")
