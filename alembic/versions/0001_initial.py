"""reports, vitals, profiles + row level security

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 10:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

# 요청 세션이 트랜잭션마다 set_config('app.current_user_id', ...) 를 해준다 (sehat.db.session.bind_user)
OWNED_TABLES = ("medical_reports", "vitals")


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("full_name", sa.String(255), nullable=True),
    )

    op.create_table(
        "medical_reports",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_type", sa.String(100), nullable=False),
        sa.Column("report_date", sa.Date(), nullable=False),
        sa.Column("summary_english", sa.Text(), nullable=True),
        sa.Column("summary_urdu", sa.Text(), nullable=True),
        sa.Column(
            "analysis_status",
            sa.Enum("pending", "succeeded", "failed", name="analysis_status", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("analysis_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "(summary_english IS NULL) = (summary_urdu IS NULL)",
            name="ck_medical_reports_summary_pair",
        ),
    )
    op.create_index("ix_medical_reports_user_id", "medical_reports", ["user_id"])

    op.create_table(
        "vitals",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("blood_pressure_systolic", sa.Integer(), nullable=True),
        sa.Column("blood_pressure_diastolic", sa.Integer(), nullable=True),
        sa.Column("blood_sugar", sa.Numeric(6, 2), nullable=True),
        sa.Column("weight", sa.Numeric(6, 2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_vitals_user_id", "vitals", ["user_id"])

    if op.get_bind().dialect.name == "postgresql":
        for table in OWNED_TABLES:
            op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
            op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
            op.execute(
                f"CREATE POLICY {table}_owner ON {table} "
                "USING (user_id = current_setting('app.current_user_id', true)::uuid) "
                "WITH CHECK (user_id = current_setting('app.current_user_id', true)::uuid)"
            )


def downgrade() -> None:
    op.drop_index("ix_vitals_user_id", table_name="vitals")
    op.drop_table("vitals")
    op.drop_index("ix_medical_reports_user_id", table_name="medical_reports")
    op.drop_table("medical_reports")
    op.drop_table("profiles")
