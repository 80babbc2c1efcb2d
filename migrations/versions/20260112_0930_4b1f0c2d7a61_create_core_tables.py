"""create users, departments, subjects, classes and enrollments

Revision ID: 4b1f0c2d7a61
Revises:
Create Date: 2026-01-12 09:30:12.481205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4b1f0c2d7a61'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='student'),
        sa.Column('image_cld_pub_id', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("role IN ('admin','teacher','student')", name='ck_users_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), sa.Identity(always=False), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )

    op.create_table(
        'subjects',
        sa.Column('id', sa.Integer(), sa.Identity(always=False), nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('code'),
    )
    op.create_index('ix_subjects_department_id', 'subjects', ['department_id'])

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), sa.Identity(always=False), nullable=False),
        sa.Column('subject_id', sa.Integer(), nullable=False),
        sa.Column('teacher_id', sa.String(length=255), nullable=False),
        sa.Column('invite_code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('banner_url', sa.String(length=1024), nullable=True),
        sa.Column('banner_cld_pub_id', sa.String(length=255), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('schedules', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['teacher_id'], ['users.id'], ondelete='RESTRICT'),
        sa.UniqueConstraint('invite_code'),
        sa.CheckConstraint("status IN ('active','inactive','archived')", name='ck_classes_status'),
    )
    op.create_index('ix_classes_subject_id', 'classes', ['subject_id'])
    op.create_index('ix_classes_teacher_id', 'classes', ['teacher_id'])

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Integer(), sa.Identity(always=False), nullable=False),
        sa.Column('student_id', sa.String(length=255), nullable=False),
        sa.Column('class_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['student_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['class_id'], ['classes.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_enrollments_student_id', 'enrollments', ['student_id'])
    op.create_index('ix_enrollments_class_id', 'enrollments', ['class_id'])
    op.create_index('uq_enrollment_student_class', 'enrollments', ['student_id', 'class_id'], unique=True)


def downgrade():
    op.drop_index('uq_enrollment_student_class', table_name='enrollments')
    op.drop_index('ix_enrollments_class_id', table_name='enrollments')
    op.drop_index('ix_enrollments_student_id', table_name='enrollments')
    op.drop_table('enrollments')

    op.drop_index('ix_classes_teacher_id', table_name='classes')
    op.drop_index('ix_classes_subject_id', table_name='classes')
    op.drop_table('classes')

    op.drop_index('ix_subjects_department_id', table_name='subjects')
    op.drop_table('subjects')

    op.drop_table('departments')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
