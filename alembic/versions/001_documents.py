"""Document store table

Revision ID: 001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'documents',
        sa.Column('path', sa.String(), nullable=False),
        sa.Column('collection', sa.String(), nullable=False),
        sa.Column('doc_id', sa.String(), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('path')
    )
    op.create_index(op.f('ix_documents_collection'), 'documents', ['collection'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_documents_collection'), table_name='documents')
    op.drop_table('documents')
