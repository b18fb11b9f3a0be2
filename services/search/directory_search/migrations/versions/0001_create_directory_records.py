from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_directory_records"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "taxonomies",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("parent_id", sa.String(length=36), sa.ForeignKey("taxonomies.id"), nullable=True),
    )
    op.create_index("ix_taxonomies_parent_id", "taxonomies", ["parent_id"])

    op.create_table(
        "directory_records",
        sa.Column("seq", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(length=36), nullable=False, unique=True),
        sa.Column("kind", sa.String(length=16), nullable=False, server_default="service"),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text, nullable=False, server_default=""),
        sa.Column("wait_time_days", sa.Float, nullable=True),
        sa.Column("is_free", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("lat", sa.Float, nullable=True),
        sa.Column("lon", sa.Float, nullable=True),
        sa.Column("enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_directory_records_kind_enabled", "directory_records", ["kind", "enabled"])
    op.create_index("ix_directory_records_lat", "directory_records", ["lat"])

    op.create_table(
        "record_taxonomies",
        sa.Column("record_id", sa.String(length=36), sa.ForeignKey("directory_records.id"), primary_key=True),
        sa.Column("taxonomy_id", sa.String(length=36), sa.ForeignKey("taxonomies.id"), primary_key=True),
        sa.Column("role", sa.String(length=16), primary_key=True),
    )
    op.create_index("ix_record_taxonomies_taxonomy_role", "record_taxonomies", ["taxonomy_id", "role"])

def downgrade() -> None:
    op.drop_index("ix_record_taxonomies_taxonomy_role", table_name="record_taxonomies")
    op.drop_table("record_taxonomies")
    op.drop_index("ix_directory_records_lat", table_name="directory_records")
    op.drop_index("ix_directory_records_kind_enabled", table_name="directory_records")
    op.drop_table("directory_records")
    op.drop_index("ix_taxonomies_parent_id", table_name="taxonomies")
    op.drop_table("taxonomies")
