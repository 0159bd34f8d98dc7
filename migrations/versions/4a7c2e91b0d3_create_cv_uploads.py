"""create_cv_uploads

Revision ID: 4a7c2e91b0d3
Revises:
Create Date: 2026-10-18 10:12:44.318207

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4a7c2e91b0d3"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "cv_uploads",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("original_name", sa.String(), nullable=False),
        sa.Column("content_type", sa.String(), nullable=True),
        sa.Column("original_size", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("compressed_size", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("compression_ratio", sa.Float(), nullable=False, server_default="0"),
        sa.Column("file_data", sa.LargeBinary(), nullable=True),
        sa.Column("file_path", sa.String(), nullable=True),
        sa.Column(
            "processing_status",
            sa.String(length=16),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("extracted_text", sa.Text(), nullable=True),
        sa.Column("markdown_content", sa.Text(), nullable=True),
        sa.Column("extracted_data", sa.JSON(), nullable=True),
        sa.Column("upload_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    # Indexes for per-user listing and quota counting
    op.create_index("ix_cv_uploads_user_id", "cv_uploads", ["user_id"])
    op.create_index("ix_cv_uploads_processing_status", "cv_uploads", ["processing_status"])


def downgrade():
    op.drop_index("ix_cv_uploads_processing_status", table_name="cv_uploads")
    op.drop_index("ix_cv_uploads_user_id", table_name="cv_uploads")
    op.drop_table("cv_uploads")
