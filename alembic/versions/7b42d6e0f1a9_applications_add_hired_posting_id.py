"""applications add hired_posting_id

Revision ID: 7b42d6e0f1a9
Revises: 3c9e1a27b4d0
Create Date: 2025-06-20 10:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7b42d6e0f1a9'
down_revision: Union[str, None] = '3c9e1a27b4d0'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.add_column(
        "applications",
        sa.Column(
            "hired_posting_id",
            sa.Integer(),
            sa.ForeignKey("job_postings.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )

    # existing hires were counted against the posting they applied to
    op.execute(
        """
        UPDATE applications
        SET hired_posting_id = job_id
        WHERE status = 'accepted'
        """
    )


def downgrade():
    op.drop_column("applications", "hired_posting_id")
