"""badge engine schema + catalog seed

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the three engine-owned tables. The collaborator tables (trips,
bucket_list_items, user_bucket_progress, checklist_items, trip_invitations)
belong to their own subsystems and are not managed here.

user_badges.(user_id, badge_key, scope_key) is unique: that constraint is
what makes awarding idempotent under duplicate and concurrent triggers.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- badges ---
    op.create_table(
        "badges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("emoji", sa.String(16), nullable=True),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("family", sa.Enum(
            "dare", "checklist", "invitation", "combo", name="badge_family_enum",
        ), nullable=False),
        sa.Column("requirement_type", sa.Enum(
            "count_threshold", "percentage_threshold", "time_relative", "compound_all_of",
            name="requirement_type_enum",
        ), nullable=False),
        sa.Column("requirement_value", sa.Integer(), nullable=False),
        sa.Column("scope", sa.Enum("global", "per_trip", name="badge_scope_enum"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_badges"),
        sa.UniqueConstraint("key", name="uq_badges_key"),
    )
    op.create_index("ix_badges_id", "badges", ["id"])

    # --- badge_progress ---
    op.create_table(
        "badge_progress",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("badge_key", sa.String(64), nullable=False),
        sa.Column("trip_id", sa.String(64), nullable=True),
        sa.Column("scope_key", sa.String(64), nullable=False),
        sa.Column("current_count", sa.Integer(), nullable=False),
        sa.Column("target_count", sa.Integer(), nullable=False),
        sa.Column("evidence", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_badge_progress"),
        sa.ForeignKeyConstraint(
            ["badge_key"], ["badges.key"], ondelete="CASCADE",
            name="fk_badge_progress_badge_key_badges",
        ),
        sa.UniqueConstraint(
            "user_id", "badge_key", "scope_key", name="uq_badge_progress_user_badge_scope"
        ),
    )
    op.create_index("ix_badge_progress_id", "badge_progress", ["id"])
    op.create_index("ix_badge_progress_user_id", "badge_progress", ["user_id"])
    op.create_index("ix_badge_progress_trip_id", "badge_progress", ["trip_id"])

    # --- user_badges ---
    op.create_table(
        "user_badges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("badge_key", sa.String(64), nullable=False),
        sa.Column("trip_id", sa.String(64), nullable=True),
        sa.Column("scope_key", sa.String(64), nullable=False),
        sa.Column("progress_snapshot", sa.Text(), nullable=True),
        sa.Column("earned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_user_badges"),
        sa.ForeignKeyConstraint(
            ["badge_key"], ["badges.key"], ondelete="CASCADE",
            name="fk_user_badges_badge_key_badges",
        ),
        sa.UniqueConstraint(
            "user_id", "badge_key", "scope_key", name="uq_user_badges_user_badge_scope"
        ),
    )
    op.create_index("ix_user_badges_id", "user_badges", ["id"])
    op.create_index("ix_user_badges_user_id", "user_badges", ["user_id"])
    op.create_index("ix_user_badges_trip_id", "user_badges", ["trip_id"])

    # --- seed catalog (mirrors app.services.catalog.BADGE_SEEDS) ---
    op.execute("""
        INSERT INTO badges (key, name, description, emoji, category, family, requirement_type, requirement_value, scope)
        VALUES
          ('daredevil',           'Daredevil',           'Complete your first dare',                     '🎯', 'dares',     'dare',       'count_threshold',      1,   'per_trip'),
          ('on_a_roll',           'On a Roll',           'Complete 3 dares on one trip',                 '🔥', 'dares',     'dare',       'count_threshold',      3,   'per_trip'),
          ('bucket_champion',     'Bucket Champion',     'Complete 5 dares on one trip',                 '🏆', 'dares',     'dare',       'count_threshold',      5,   'per_trip'),
          ('bucket_legend',       'Bucket Legend',       'Complete every dare on your trip list',        '👑', 'dares',     'dare',       'percentage_threshold', 100, 'per_trip'),
          ('no_fear',             'No Fear',             'Complete a hard dare',                         '😈', 'dares',     'dare',       'count_threshold',      1,   'per_trip'),
          ('checklist_conqueror', 'Checklist Conqueror', 'Tick off your whole checklist',                '✅', 'checklist', 'checklist',  'percentage_threshold', 100, 'per_trip'),
          ('detail_oriented',     'Detail-Oriented',     'Build a checklist with 15 or more items',      '🔍', 'checklist', 'checklist',  'count_threshold',      15,  'per_trip'),
          ('prepared_pro',        'Prepared Pro',        'Finish your checklist 3 days before the trip', '🧳', 'checklist', 'checklist',  'time_relative',        3,   'per_trip'),
          ('checklist_master',    'Checklist Master',    'Finish the checklist on 5 different trips',    '📋', 'checklist', 'checklist',  'count_threshold',      5,   'global'),
          ('social_explorer',     'Social Explorer',     'Invite your first travel buddy',               '👋', 'social',    'invitation', 'count_threshold',      1,   'per_trip'),
          ('travel_crew',         'Travel Crew',         'Invite 3 people to one trip',                  '👥', 'social',    'invitation', 'count_threshold',      3,   'per_trip'),
          ('squad_goals',         'Squad Goals',         'Get 3 invitations accepted on one trip',       '🤝', 'social',    'invitation', 'count_threshold',      3,   'per_trip'),
          ('referral_master',     'Referral Master',     'Get 5 invitations accepted across your trips', '🌟', 'social',    'invitation', 'count_threshold',      5,   'global'),
          ('world_builder',       'World Builder',       'Complete a dare, tick a checklist item and invite someone on the same trip', '🌍', 'combo', 'combo', 'compound_all_of', 3, 'per_trip')
    """)


def downgrade() -> None:
    op.drop_table("user_badges")
    op.drop_table("badge_progress")
    op.drop_table("badges")

    op.execute("DROP TYPE IF EXISTS badge_scope_enum")
    op.execute("DROP TYPE IF EXISTS requirement_type_enum")
    op.execute("DROP TYPE IF EXISTS badge_family_enum")
