"""Initial walk-in queue schema.

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-01-25
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None

STAFF_ROLE = sa.Enum("ADMIN", "STAFF", name="staffrole")
CLIENT_TYPE = sa.Enum("REGULAR", "SENIOR_CITIZEN", "PWD", "PREGNANT", name="clienttype")
QUEUE_STATUS = sa.Enum("WAITING", "NOW_SERVING", "SERVED", "SKIPPED", name="queuestatus")


def _timestamps():
    return [
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "staff",
        *_timestamps(),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", STAFF_ROLE, nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("last_seen_at", sa.DateTime(), nullable=True),
    )
    op.create_index("idx_staff_username", "staff", ["username"])
    op.create_index("idx_staff_role_active", "staff", ["role", "active"])

    op.create_table(
        "windows",
        *_timestamps(),
        sa.Column("label", sa.String(50), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )

    op.create_table(
        "window_assignments",
        *_timestamps(),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE"), nullable=False),
        sa.Column("window_id", sa.Integer(), sa.ForeignKey("windows.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("assigned_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "idx_window_assignment_staff_active", "window_assignments", ["staff_id", "is_active"]
    )
    op.create_index(
        "idx_window_assignment_window_active", "window_assignments", ["window_id", "is_active"]
    )

    op.create_table(
        "categories",
        *_timestamps(),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
    )

    op.create_table(
        "sub_categories",
        *_timestamps(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "category_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
        ),
        sa.UniqueConstraint("category_id", "name", name="uq_sub_category_name"),
    )
    op.create_index("idx_sub_category_category", "sub_categories", ["category_id"])

    op.create_table(
        "staff_categories",
        *_timestamps(),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "category_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
        ),
        sa.UniqueConstraint("staff_id", "category_id", name="uq_staff_category"),
    )

    op.create_table(
        "daily_counters",
        *_timestamps(),
        sa.Column("date_key", sa.String(10), nullable=False),
        sa.Column("counter", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("date_key", name="uq_daily_counter_date_key"),
        sa.CheckConstraint("counter >= 0", name="ck_daily_counter_non_negative"),
    )

    op.create_table(
        "queue_entries",
        *_timestamps(),
        sa.Column("queue_number", sa.String(32), nullable=False, unique=True),
        sa.Column("client_name", sa.String(200), nullable=False),
        sa.Column("client_type", CLIENT_TYPE, nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("sub_category_id", sa.Integer(), sa.ForeignKey("sub_categories.id"), nullable=True),
        sa.Column("concern_category_ids", sa.Text(), nullable=True),
        sa.Column("concern_sub_category_ids", sa.Text(), nullable=True),
        sa.Column("status", QUEUE_STATUS, nullable=False),
        sa.Column(
            "window_id", sa.Integer(), sa.ForeignKey("windows.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column(
            "skipped_by_staff_id",
            sa.Integer(),
            sa.ForeignKey("staff.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.Column("served_at", sa.DateTime(), nullable=True),
    )
    op.create_index("idx_queue_entry_status_created", "queue_entries", ["status", "created_at"])
    op.create_index("idx_queue_entry_window_status", "queue_entries", ["window_id", "status"])
    op.create_index("idx_queue_entry_joined", "queue_entries", ["joined_at"])
    op.create_index("idx_queue_entry_category", "queue_entries", ["category_id"])

    op.create_table(
        "serving_logs",
        *_timestamps(),
        sa.Column(
            "queue_entry_id",
            sa.Integer(),
            sa.ForeignKey("queue_entries.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="SET NULL"), nullable=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("sub_category_id", sa.Integer(), sa.ForeignKey("sub_categories.id"), nullable=True),
        sa.Column("client_type", CLIENT_TYPE, nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("served_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_serving_log_staff_served", "serving_logs", ["staff_id", "served_at"])


def downgrade():
    op.drop_index("idx_serving_log_staff_served", table_name="serving_logs")
    op.drop_table("serving_logs")
    for name in (
        "idx_queue_entry_category",
        "idx_queue_entry_joined",
        "idx_queue_entry_window_status",
        "idx_queue_entry_status_created",
    ):
        op.drop_index(name, table_name="queue_entries")
    op.drop_table("queue_entries")
    op.drop_table("daily_counters")
    op.drop_table("staff_categories")
    op.drop_index("idx_sub_category_category", table_name="sub_categories")
    op.drop_table("sub_categories")
    op.drop_table("categories")
    op.drop_index("idx_window_assignment_window_active", table_name="window_assignments")
    op.drop_index("idx_window_assignment_staff_active", table_name="window_assignments")
    op.drop_table("window_assignments")
    op.drop_table("windows")
    op.drop_index("idx_staff_role_active", table_name="staff")
    op.drop_index("idx_staff_username", table_name="staff")
    op.drop_table("staff")
    bind = op.get_bind()
    for enum_type in (QUEUE_STATUS, CLIENT_TYPE, STAFF_ROLE):
        enum_type.drop(bind, checkfirst=True)
