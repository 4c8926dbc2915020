"""Gamification tables.

Creates users, user_gamification, user_badges, points_history,
notifications and registrations.

Revision ID: 001_gamification_tables
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_gamification_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users (mirror of the identity provider) ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(128) PRIMARY KEY,
            email VARCHAR(320) UNIQUE NOT NULL,
            name VARCHAR(128) NOT NULL,
            department VARCHAR(128),
            year INTEGER,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- User Gamification (GameStats) ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_gamification (
            user_id VARCHAR(128) PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            points BIGINT NOT NULL DEFAULT 0 CHECK (points >= 0),
            level INTEGER NOT NULL DEFAULT 1,
            level_name VARCHAR(64) NOT NULL DEFAULT 'Newcomer',
            daily_streak INTEGER NOT NULL DEFAULT 0,
            weekly_streak INTEGER NOT NULL DEFAULT 0,
            hackathon_streak INTEGER NOT NULL DEFAULT 0,
            last_daily_login TIMESTAMPTZ,
            streak_updated_at TIMESTAMPTZ,
            total_participations INTEGER NOT NULL DEFAULT 0,
            total_wins INTEGER NOT NULL DEFAULT 0,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            version INTEGER NOT NULL DEFAULT 1
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_gam_points
        ON user_gamification(points DESC)
    """)

    # --- User Badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(128) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id VARCHAR(64) NOT NULL,
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_user_badges_user_badge UNIQUE(user_id, badge_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_user_badges_user_id
        ON user_badges(user_id)
    """)

    # --- Points History ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS points_history (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(128) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            points BIGINT NOT NULL,
            requested_points BIGINT NOT NULL,
            reason VARCHAR(256) NOT NULL,
            previous_total BIGINT NOT NULL,
            new_total BIGINT NOT NULL,
            leveled_up BOOLEAN NOT NULL DEFAULT false,
            old_level INTEGER NOT NULL,
            new_level INTEGER NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_points_history_user_id
        ON points_history(user_id, created_at DESC)
    """)

    # --- Notifications ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS notifications (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(128) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(32) NOT NULL,
            subtype VARCHAR(64) NOT NULL,
            title VARCHAR(256) NOT NULL,
            message TEXT,
            action_url VARCHAR(256),
            is_read BOOLEAN NOT NULL DEFAULT false,
            metadata JSON,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_notifications_user_id
        ON notifications(user_id, created_at DESC)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_notifications_unread
        ON notifications(user_id)
        WHERE is_read = false
    """)

    # --- Registrations ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS registrations (
            id BIGSERIAL PRIMARY KEY,
            hackathon_id VARCHAR(128) NOT NULL,
            user_id VARCHAR(128) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            team_name VARCHAR(128),
            team_members JSON NOT NULL DEFAULT '[]',
            status VARCHAR(16) NOT NULL DEFAULT 'pending',
            submitted_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            reviewed_at TIMESTAMPTZ,
            feedback TEXT,
            CONSTRAINT uq_registrations_user_hackathon UNIQUE(user_id, hackathon_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_registrations_user_id
        ON registrations(user_id)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS registrations CASCADE")
    op.execute("DROP TABLE IF EXISTS notifications CASCADE")
    op.execute("DROP TABLE IF EXISTS points_history CASCADE")
    op.execute("DROP TABLE IF EXISTS user_badges CASCADE")
    op.execute("DROP TABLE IF EXISTS user_gamification CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
