"""init schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "stations",
        sa.Column("code", sa.String(length=10), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("ruc", sa.String(length=20), nullable=True),
        sa.Column("legal_name", sa.String(length=200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "app_users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("full_name", sa.String(length=160), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="inspector"),
        sa.Column("station", sa.String(length=10), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_app_users_email", "app_users", ["email"], unique=True)
    op.create_index("ix_app_users_station", "app_users", ["station"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("actor_email", sa.String(length=200), nullable=True),
        sa.Column("station", sa.String(length=10), nullable=True),
        sa.Column("action", sa.String(length=80), nullable=False),
        sa.Column("entity_type", sa.String(length=80), nullable=False),
        sa.Column("entity_id", sa.String(length=80), nullable=False),
        sa.Column("before_json", sa.Text(), nullable=True),
        sa.Column("after_json", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_events_actor_email", "audit_events", ["actor_email"])
    op.create_index("ix_audit_events_station", "audit_events", ["station"])

    op.create_table(
        "inspections",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("form_code", sa.String(length=40), nullable=True, unique=True),
        sa.Column("user_email", sa.String(length=200), nullable=True),
        sa.Column("station", sa.String(length=10), nullable=False),
        sa.Column("inspection_date", sa.Date(), nullable=False),
        sa.Column("inspection_type", sa.String(length=30), nullable=False),
        sa.Column("inspector_name", sa.String(length=160), nullable=False),
        sa.Column("supervisor_name", sa.String(length=160), nullable=True),
        sa.Column("supervisor_signature_url", sa.Text(), nullable=True),
        sa.Column("supervisor_signature_date", sa.DateTime(), nullable=True),
        sa.Column("mechanic_name", sa.String(length=160), nullable=True),
        sa.Column("mechanic_signature_url", sa.Text(), nullable=True),
        sa.Column("mechanic_signature_date", sa.DateTime(), nullable=True),
        sa.Column("additional_comments", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_inspections_user_email", "inspections", ["user_email"])
    op.create_index("ix_inspections_station", "inspections", ["station"])
    op.create_index("ix_inspections_status", "inspections", ["status"])
    op.create_index("ix_inspections_station_date", "inspections", ["station", "inspection_date"])

    op.create_table(
        "equipment_master",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("station", sa.String(length=10), nullable=False),
        sa.Column("type", sa.String(length=80), nullable=False),
        sa.Column("brand", sa.String(length=80), nullable=True),
        sa.Column("model", sa.String(length=80), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("serial_number", sa.String(length=80), nullable=True),
        sa.Column("motor_serial", sa.String(length=80), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_equipment_master_code", "equipment_master", ["code"], unique=True)
    op.create_index("ix_equipment_master_station", "equipment_master", ["station"])

    op.create_table(
        "equipment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("inspection_id", sa.Integer(), sa.ForeignKey("inspections.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "equipment_master_id",
            sa.Integer(),
            sa.ForeignKey("equipment_master.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("type", sa.String(length=80), nullable=False),
        sa.Column("brand", sa.String(length=80), nullable=True),
        sa.Column("model", sa.String(length=80), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("serial_number", sa.String(length=80), nullable=True),
        sa.Column("motor_serial", sa.String(length=80), nullable=True),
        sa.Column("station", sa.String(length=10), nullable=True),
        sa.Column("checklist_data", sa.JSON(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("inspector_signature_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_equipment_inspection_id", "equipment", ["inspection_id"])
    op.create_index("ix_equipment_code", "equipment", ["code"])

    op.create_table(
        "observations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("inspection_id", sa.Integer(), sa.ForeignKey("inspections.id", ondelete="CASCADE"), nullable=False),
        sa.Column("obs_id", sa.String(length=20), nullable=False),
        sa.Column("equipment_code", sa.String(length=20), nullable=False),
        sa.Column("obs_operator", sa.Text(), nullable=False),
        sa.Column("obs_maintenance", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("inspection_id", "obs_id", name="uq_observations_inspection_obs"),
    )
    op.create_index("ix_observations_inspection_id", "observations", ["inspection_id"])

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("dni", sa.String(length=20), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("position", sa.String(length=120), nullable=True),
        sa.Column("area", sa.String(length=80), nullable=True),
        sa.Column("station_code", sa.String(length=10), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_employees_dni", "employees", ["dni"], unique=True)
    op.create_index("ix_employees_station_code", "employees", ["station_code"])

    op.create_table(
        "bulletins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=40), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("alert_level", sa.String(length=10), nullable=False, server_default="VERDE"),
        sa.Column("organization", sa.String(length=120), nullable=True),
        sa.Column("document_url", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_bulletins_code", "bulletins", ["code"], unique=True)

    op.create_table(
        "talk_schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("bulletin_id", sa.Integer(), sa.ForeignKey("bulletins.id", ondelete="CASCADE"), nullable=False),
        sa.Column("station_code", sa.String(length=10), nullable=True),
        sa.Column("is_mandatory", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
    )
    op.create_index("ix_talk_schedules_scheduled_date", "talk_schedules", ["scheduled_date"])

    op.create_table(
        "talk_executions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "schedule_id", sa.Integer(), sa.ForeignKey("talk_schedules.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("bulletin_id", sa.Integer(), sa.ForeignKey("bulletins.id", ondelete="SET NULL"), nullable=True),
        sa.Column("station_code", sa.String(length=10), nullable=False),
        sa.Column("executed_at", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=True),
        sa.Column("end_time", sa.String(length=5), nullable=True),
        sa.Column("duration_min", sa.Integer(), nullable=True),
        sa.Column("scheduled_headcount", sa.Integer(), nullable=True),
        sa.Column("presenter_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("presenter_signature", sa.Text(), nullable=True),
        sa.Column("activity_type", sa.String(length=40), nullable=True),
        sa.Column("observations", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_talk_executions_schedule_id", "talk_executions", ["schedule_id"])
    op.create_index("ix_talk_executions_station_code", "talk_executions", ["station_code"])

    op.create_table(
        "talk_attendees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("talk_id", sa.Integer(), sa.ForeignKey("talk_executions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("signature", sa.Text(), nullable=True),
        sa.Column("attended", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("talk_id", "employee_id", name="uq_talk_attendees_talk_employee"),
    )


def downgrade():
    op.drop_table("talk_attendees")
    op.drop_index("ix_talk_executions_station_code", table_name="talk_executions")
    op.drop_index("ix_talk_executions_schedule_id", table_name="talk_executions")
    op.drop_table("talk_executions")
    op.drop_index("ix_talk_schedules_scheduled_date", table_name="talk_schedules")
    op.drop_table("talk_schedules")
    op.drop_index("ix_bulletins_code", table_name="bulletins")
    op.drop_table("bulletins")
    op.drop_index("ix_employees_station_code", table_name="employees")
    op.drop_index("ix_employees_dni", table_name="employees")
    op.drop_table("employees")
    op.drop_index("ix_observations_inspection_id", table_name="observations")
    op.drop_table("observations")
    op.drop_index("ix_equipment_code", table_name="equipment")
    op.drop_index("ix_equipment_inspection_id", table_name="equipment")
    op.drop_table("equipment")
    op.drop_index("ix_equipment_master_station", table_name="equipment_master")
    op.drop_index("ix_equipment_master_code", table_name="equipment_master")
    op.drop_table("equipment_master")
    op.drop_index("ix_inspections_station_date", table_name="inspections")
    op.drop_index("ix_inspections_status", table_name="inspections")
    op.drop_index("ix_inspections_station", table_name="inspections")
    op.drop_index("ix_inspections_user_email", table_name="inspections")
    op.drop_table("inspections")
    op.drop_index("ix_audit_events_station", table_name="audit_events")
    op.drop_index("ix_audit_events_actor_email", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_index("ix_app_users_station", table_name="app_users")
    op.drop_index("ix_app_users_email", table_name="app_users")
    op.drop_table("app_users")
    op.drop_table("stations")
