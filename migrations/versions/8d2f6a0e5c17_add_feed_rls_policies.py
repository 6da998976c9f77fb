"""add_feed_rls_policies

Revision ID: 8d2f6a0e5c17
Revises: 4b7e1c2a9d30
Create Date: 2026-10-19 09:40:03.117962

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8d2f6a0e5c17"
down_revision: str | Sequence[str] | None = "4b7e1c2a9d30"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TABLES = ("profiles", "posts", "likes")


def upgrade() -> None:
    """Add Row Level Security policies for the feed tables.

    The API connects with a role that bypasses RLS and checks ownership in
    the service layer. These policies cover direct Supabase client access.
    """
    for table in TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles ---
    op.execute("""
        CREATE POLICY profiles_select ON profiles
            FOR SELECT USING ((SELECT auth.uid()) IS NOT NULL);
    """)
    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK (id = (SELECT auth.uid()));
    """)

    # --- Posts: readable by any signed-in user, writable by the author ---
    op.execute("""
        CREATE POLICY posts_select ON posts
            FOR SELECT USING ((SELECT auth.uid()) IS NOT NULL);
    """)
    op.execute("""
        CREATE POLICY posts_insert ON posts
            FOR INSERT WITH CHECK (author_id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY posts_update ON posts
            FOR UPDATE USING (author_id = (SELECT auth.uid()))
            WITH CHECK (author_id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY posts_delete ON posts
            FOR DELETE USING (author_id = (SELECT auth.uid()));
    """)

    # --- Likes: each user manages only their own rows ---
    op.execute("""
        CREATE POLICY likes_select ON likes
            FOR SELECT USING ((SELECT auth.uid()) IS NOT NULL);
    """)
    op.execute("""
        CREATE POLICY likes_insert ON likes
            FOR INSERT WITH CHECK (user_id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY likes_delete ON likes
            FOR DELETE USING (user_id = (SELECT auth.uid()));
    """)


def downgrade() -> None:
    """Remove feed RLS policies."""
    policies = {
        "profiles": ("profiles_select", "profiles_insert"),
        "posts": ("posts_select", "posts_insert", "posts_update", "posts_delete"),
        "likes": ("likes_select", "likes_insert", "likes_delete"),
    }
    for table, names in policies.items():
        for name in names:
            op.execute(f"DROP POLICY IF EXISTS {name} ON {table};")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")
