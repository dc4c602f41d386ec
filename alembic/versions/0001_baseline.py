"""Baseline migration - HRMS schema

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates users, time tracking, leave/forms, chat, payroll, announcements,
projects, notifications, meetings and calendar tables.
"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


PRIORITY_CHECK = "IN ('low', 'medium', 'high')"


def upgrade() -> None:
    """Create all HRMS tables."""

    op.execute('CREATE EXTENSION IF NOT EXISTS pgcrypto')  # For gen_random_uuid()

    # ==========================================================================
    # Users & Documents
    # ==========================================================================
    op.execute('''
        CREATE TABLE users (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR(255) NOT NULL,
            email VARCHAR(320) UNIQUE NOT NULL,
            employee_id VARCHAR(64) UNIQUE NOT NULL,
            password_hash VARCHAR(255),
            role VARCHAR(20) NOT NULL DEFAULT 'user',
            two_factor_enabled BOOLEAN NOT NULL DEFAULT false,
            two_factor_secret VARCHAR(64),
            avatar VARCHAR(500),
            department VARCHAR(255),
            position VARCHAR(255),
            token_version INTEGER NOT NULL DEFAULT 1,
            is_active BOOLEAN NOT NULL DEFAULT true,
            last_signed_in TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_users_role CHECK (role IN ('user', 'admin'))
        )
    ''')

    op.execute('''
        CREATE TABLE employee_documents (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            document_type VARCHAR(40) NOT NULL,
            title VARCHAR(255) NOT NULL,
            document_url VARCHAR(500) NOT NULL,
            uploaded_by UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_employee_documents_user_type UNIQUE (user_id, document_type),
            CONSTRAINT ck_employee_documents_type CHECK (document_type IN (
                'offer_letter', 'contract', 'id_proof', 'id_proof_front',
                'id_proof_back', 'policy_acknowledgment', 'other'
            ))
        )
    ''')

    # ==========================================================================
    # Time Tracking
    # ==========================================================================
    op.execute('''
        CREATE TABLE time_entries (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            time_in TIMESTAMPTZ NOT NULL,
            time_out TIMESTAMPTZ,
            total_hours NUMERIC(12, 2),
            status VARCHAR(20) NOT NULL DEFAULT 'active',
            notes TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_time_entries_status CHECK (status IN ('active', 'completed', 'early_out'))
        )
    ''')
    op.execute('CREATE INDEX idx_time_entries_user_time_in ON time_entries(user_id, time_in)')
    # At most one active entry per user
    op.execute('''
        CREATE UNIQUE INDEX uq_time_entries_one_active_per_user
        ON time_entries(user_id) WHERE status = 'active'
    ''')

    op.execute('''
        CREATE TABLE break_logs (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            time_entry_id UUID NOT NULL REFERENCES time_entries(id) ON DELETE CASCADE,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            break_start TIMESTAMPTZ NOT NULL,
            break_end TIMESTAMPTZ,
            duration INTEGER,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX ix_break_logs_time_entry_id ON break_logs(time_entry_id)')
    # At most one open break per entry
    op.execute('''
        CREATE UNIQUE INDEX uq_break_logs_one_open_per_entry
        ON break_logs(time_entry_id) WHERE break_end IS NULL
    ''')

    # ==========================================================================
    # Leave & Forms
    # ==========================================================================
    op.execute('''
        CREATE TABLE leave_applications (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            leave_type VARCHAR(20) NOT NULL,
            start_date DATE NOT NULL,
            end_date DATE NOT NULL,
            reason TEXT NOT NULL,
            status VARCHAR(20) NOT NULL DEFAULT 'pending',
            approved_by UUID REFERENCES users(id) ON DELETE SET NULL,
            approved_at TIMESTAMPTZ,
            rejection_reason TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_leave_applications_type CHECK (
                leave_type IN ('sick', 'casual', 'annual', 'unpaid', 'other')
            ),
            CONSTRAINT ck_leave_applications_status CHECK (
                status IN ('pending', 'approved', 'rejected')
            )
        )
    ''')

    op.execute('''
        CREATE TABLE form_submissions (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            form_type VARCHAR(20) NOT NULL,
            subject VARCHAR(500) NOT NULL,
            content TEXT NOT NULL,
            priority VARCHAR(10) NOT NULL DEFAULT 'medium',
            status VARCHAR(20) NOT NULL DEFAULT 'submitted',
            responded_by UUID REFERENCES users(id) ON DELETE SET NULL,
            response TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_form_submissions_type CHECK (
                form_type IN ('resignation', 'leave', 'grievance', 'feedback')
            ),
            CONSTRAINT ck_form_submissions_status CHECK (
                status IN ('submitted', 'under_review', 'resolved', 'closed')
            )
        )
    ''')

    # ==========================================================================
    # Chat
    # ==========================================================================
    op.execute('''
        CREATE TABLE chat_messages (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            sender_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            recipient_id UUID REFERENCES users(id) ON DELETE CASCADE,
            message TEXT NOT NULL,
            is_read BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_chat_messages_created ON chat_messages(created_at)')

    # ==========================================================================
    # Payroll & Announcements
    # ==========================================================================
    op.execute('''
        CREATE TABLE payslips (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            month INTEGER NOT NULL,
            year INTEGER NOT NULL,
            basic_salary NUMERIC(12, 2) NOT NULL,
            allowances NUMERIC(12, 2) NOT NULL DEFAULT 0,
            deductions NUMERIC(12, 2) NOT NULL DEFAULT 0,
            net_salary NUMERIC(12, 2) NOT NULL,
            working_days INTEGER NOT NULL,
            present_days INTEGER NOT NULL,
            paid_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_payslips_month CHECK (month BETWEEN 1 AND 12)
        )
    ''')
    op.execute('CREATE INDEX idx_payslips_user_period ON payslips(user_id, year, month)')

    op.execute(f'''
        CREATE TABLE announcements (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            title VARCHAR(500) NOT NULL,
            content TEXT NOT NULL,
            priority VARCHAR(10) NOT NULL DEFAULT 'medium',
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_by UUID REFERENCES users(id) ON DELETE SET NULL,
            expires_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_announcements_priority CHECK (priority {PRIORITY_CHECK})
        )
    ''')

    op.execute('''
        CREATE TABLE announcement_reads (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            announcement_id UUID NOT NULL REFERENCES announcements(id) ON DELETE CASCADE,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            read_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_announcement_reads UNIQUE (announcement_id, user_id)
        )
    ''')

    # ==========================================================================
    # Projects
    # ==========================================================================
    op.execute('''
        CREATE TABLE projects (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR(255) NOT NULL,
            description TEXT,
            status VARCHAR(20) NOT NULL DEFAULT 'active',
            priority VARCHAR(10) NOT NULL DEFAULT 'medium',
            source VARCHAR(20) NOT NULL DEFAULT 'team_lead',
            start_date DATE,
            end_date DATE,
            created_by UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_projects_status CHECK (
                status IN ('active', 'on_hold', 'completed', 'cancelled')
            ),
            CONSTRAINT ck_projects_source CHECK (source IN ('team_lead', 'employee'))
        )
    ''')

    op.execute('''
        CREATE TABLE project_assignments (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            role VARCHAR(50) NOT NULL DEFAULT 'member',
            assigned_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_project_assignments UNIQUE (project_id, user_id)
        )
    ''')

    op.execute('''
        CREATE TABLE project_tasks (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            time_entry_id UUID REFERENCES time_entries(id) ON DELETE SET NULL,
            title VARCHAR(500) NOT NULL,
            description TEXT,
            status VARCHAR(20) NOT NULL DEFAULT 'todo',
            priority VARCHAR(10) NOT NULL DEFAULT 'medium',
            completed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_project_tasks_status CHECK (
                status IN ('todo', 'in_progress', 'completed', 'blocked')
            )
        )
    ''')
    op.execute('CREATE INDEX ix_project_tasks_project_id ON project_tasks(project_id)')
    op.execute('CREATE INDEX idx_project_tasks_user_status ON project_tasks(user_id, status)')

    # ==========================================================================
    # Notifications
    # ==========================================================================
    op.execute('''
        CREATE TABLE notifications (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(40) NOT NULL,
            title VARCHAR(500) NOT NULL,
            message TEXT NOT NULL,
            priority VARCHAR(10) NOT NULL DEFAULT 'medium',
            is_read BOOLEAN NOT NULL DEFAULT false,
            related_id UUID,
            related_type VARCHAR(50),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_notifications_type CHECK (type IN (
                'project_assigned', 'attendance_issue', 'hours_shortfall',
                'leave_approved', 'leave_rejected', 'announcement', 'system_alert'
            ))
        )
    ''')
    op.execute('CREATE INDEX idx_notifications_user_unread ON notifications(user_id, is_read)')

    # ==========================================================================
    # Meetings & Calendar
    # ==========================================================================
    op.execute('''
        CREATE TABLE meetings (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            title VARCHAR(500) NOT NULL,
            description TEXT,
            agenda TEXT,
            start_time TIMESTAMPTZ NOT NULL,
            end_time TIMESTAMPTZ NOT NULL,
            location VARCHAR(500),
            meeting_link VARCHAR(1000),
            organizer_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            status VARCHAR(20) NOT NULL DEFAULT 'scheduled',
            meeting_minutes TEXT,
            action_items TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_meetings_status CHECK (
                status IN ('scheduled', 'in_progress', 'completed', 'cancelled')
            )
        )
    ''')
    op.execute('CREATE INDEX idx_meetings_start_time ON meetings(start_time)')

    op.execute('''
        CREATE TABLE meeting_participants (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            meeting_id UUID NOT NULL REFERENCES meetings(id) ON DELETE CASCADE,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            response_status VARCHAR(20) NOT NULL DEFAULT 'pending',
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_meeting_participants UNIQUE (meeting_id, user_id),
            CONSTRAINT ck_meeting_participants_response CHECK (
                response_status IN ('pending', 'accepted', 'declined', 'tentative')
            )
        )
    ''')

    op.execute('''
        CREATE TABLE calendar_events (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(500) NOT NULL,
            description TEXT,
            event_type VARCHAR(20) NOT NULL,
            start_time TIMESTAMPTZ NOT NULL,
            end_time TIMESTAMPTZ,
            is_all_day BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT ck_calendar_events_type CHECK (
                event_type IN ('reminder', 'personal', 'deadline', 'holiday')
            )
        )
    ''')
    op.execute('CREATE INDEX idx_calendar_events_user_start ON calendar_events(user_id, start_time)')


def downgrade() -> None:
    """Drop all HRMS tables."""
    for table in (
        'calendar_events',
        'meeting_participants',
        'meetings',
        'notifications',
        'project_tasks',
        'project_assignments',
        'projects',
        'announcement_reads',
        'announcements',
        'payslips',
        'chat_messages',
        'form_submissions',
        'leave_applications',
        'break_logs',
        'time_entries',
        'employee_documents',
        'users',
    ):
        op.execute(f'DROP TABLE IF EXISTS {table} CASCADE')
