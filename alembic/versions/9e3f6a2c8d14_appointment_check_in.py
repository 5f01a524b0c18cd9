"""appointment check in

Revision ID: 9e3f6a2c8d14
Revises: 4b2d9c7e1a05
Create Date: 2026-10-18 15:40:07.118342

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '9e3f6a2c8d14'
down_revision: Union[str, Sequence[str], None] = '4b2d9c7e1a05'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column('appointments', sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column('appointments', 'checked_in_at')
