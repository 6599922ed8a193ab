"""initial hr schema

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = 'a1c3e5f7b901'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'departments',
        *_audit_columns(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_departments_id'), 'departments', ['id'], unique=False)

    op.create_table(
        'employees',
        *_audit_columns(),
        sa.Column('employee_code', sa.String(length=30), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('designation', sa.String(length=100), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=True),
        sa.Column('manager_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', 'ONBOARDING', 'OFFBOARDED', name='employeestatus'), nullable=False),
        sa.Column('working_hours_start', sa.Time(), nullable=True),
        sa.Column('working_hours_end', sa.Time(), nullable=True),
        sa.Column('working_days', sa.JSON(), nullable=True),
        sa.Column('avatar_url', sa.String(length=255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
        sa.ForeignKeyConstraint(['manager_id'], ['employees.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(op.f('ix_employees_id'), 'employees', ['id'], unique=False)
    # unique index: concurrent code allocation relies on it to detect collisions
    op.create_index(op.f('ix_employees_employee_code'), 'employees', ['employee_code'], unique=True)

    op.create_table(
        'attendance_records',
        *_audit_columns(),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('clock_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_hours', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('status', sa.Enum('PRESENT', 'LATE', 'ABSENT', 'HALF_DAY', name='attendancestatus'), nullable=False),
        sa.Column('work_mode', sa.Enum('WFH', 'WFO', name='workmode'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('clock_in_latitude', sa.Numeric(precision=10, scale=8), nullable=True),
        sa.Column('clock_in_longitude', sa.Numeric(precision=11, scale=8), nullable=True),
        sa.Column('clock_in_location_name', sa.String(length=255), nullable=True),
        sa.Column('clock_out_latitude', sa.Numeric(precision=10, scale=8), nullable=True),
        sa.Column('clock_out_longitude', sa.Numeric(precision=11, scale=8), nullable=True),
        sa.Column('clock_out_location_name', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id', 'date', name='uq_attendance_employee_date'),
    )
    op.create_index(op.f('ix_attendance_records_id'), 'attendance_records', ['id'], unique=False)
    op.create_index(op.f('ix_attendance_records_employee_id'), 'attendance_records', ['employee_id'], unique=False)
    op.create_index(op.f('ix_attendance_records_date'), 'attendance_records', ['date'], unique=False)

    op.create_table(
        'attendance_breaks',
        *_audit_columns(),
        sa.Column('attendance_record_id', sa.Integer(), nullable=False),
        sa.Column('pause_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('resume_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('pause_latitude', sa.Numeric(precision=10, scale=8), nullable=True),
        sa.Column('pause_longitude', sa.Numeric(precision=11, scale=8), nullable=True),
        sa.Column('pause_location_name', sa.String(length=255), nullable=True),
        sa.Column('resume_latitude', sa.Numeric(precision=10, scale=8), nullable=True),
        sa.Column('resume_longitude', sa.Numeric(precision=11, scale=8), nullable=True),
        sa.Column('resume_location_name', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['attendance_record_id'], ['attendance_records.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_attendance_breaks_id'), 'attendance_breaks', ['id'], unique=False)
    op.create_index(op.f('ix_attendance_breaks_attendance_record_id'), 'attendance_breaks', ['attendance_record_id'], unique=False)

    op.create_table(
        'leave_types',
        *_audit_columns(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('days_per_year', sa.Integer(), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_leave_types_id'), 'leave_types', ['id'], unique=False)

    op.create_table(
        'leave_requests',
        *_audit_columns(),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('leave_type_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('days_count', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'CANCELLED', name='leavestatus'), nullable=False),
        sa.Column('reviewer_name', sa.String(length=100), nullable=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id']),
        sa.ForeignKeyConstraint(['leave_type_id'], ['leave_types.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_leave_requests_id'), 'leave_requests', ['id'], unique=False)
    op.create_index(op.f('ix_leave_requests_employee_id'), 'leave_requests', ['employee_id'], unique=False)

    op.create_table(
        'salary_structures',
        *_audit_columns(),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('basic_salary', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('hra', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('transport_allowance', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('medical_allowance', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('other_allowances', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('tax_deduction', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('other_deductions', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('effective_from', sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id'),
    )
    op.create_index(op.f('ix_salary_structures_id'), 'salary_structures', ['id'], unique=False)

    op.create_table(
        'payroll_records',
        *_audit_columns(),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('basic_salary', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('total_allowances', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('total_deductions', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('net_salary', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.Enum('DRAFT', 'PROCESSED', 'PAID', name='payrollstatus'), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id', 'month', 'year', name='uq_payroll_employee_month'),
    )
    op.create_index(op.f('ix_payroll_records_id'), 'payroll_records', ['id'], unique=False)
    op.create_index(op.f('ix_payroll_records_employee_id'), 'payroll_records', ['employee_id'], unique=False)

    op.create_table(
        'system_settings',
        *_audit_columns(),
        sa.Column('setting_key', sa.String(length=100), nullable=False),
        sa.Column('setting_value', sa.JSON(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('setting_key'),
    )
    op.create_index(op.f('ix_system_settings_id'), 'system_settings', ['id'], unique=False)

    op.create_table(
        'notifications',
        *_audit_columns(),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.Enum('INFO', 'SUCCESS', 'WARNING', 'ERROR', name='notificationtype'), nullable=False),
        sa.Column('link', sa.String(length=255), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'], unique=False)
    op.create_index(op.f('ix_notifications_employee_id'), 'notifications', ['employee_id'], unique=False)


def downgrade() -> None:
    for table in (
        'notifications', 'system_settings', 'payroll_records', 'salary_structures',
        'leave_requests', 'leave_types', 'attendance_breaks', 'attendance_records',
        'employees', 'departments',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_name in (
            'notificationtype', 'payrollstatus', 'leavestatus', 'workmode',
            'attendancestatus', 'employeestatus',
        ):
            sa.Enum(name=enum_name).drop(bind, checkfirst=True)
