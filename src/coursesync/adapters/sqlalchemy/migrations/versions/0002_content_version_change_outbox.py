"""Record content_version changes in an outbox table via triggers

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0002"
down_revision: str | Sequence[str] | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_SNAPSHOT_COLUMNS = (
    "version_code",
    "class_id",
    "pathway_id",
    "version_number",
    "status",
    "delivery_method",
    "drive_link",
    "notes",
)
_INSERT_COLUMNS = ", ".join(("kind", "version_id", *_SNAPSHOT_COLUMNS))


def _values(kind: str, row: str) -> str:
    columns = ", ".join(f"{row}.{column}" for column in _SNAPSHOT_COLUMNS)
    return f"'{kind}', {row}.id, {columns}"


def _sqlite_trigger(operation: str, kind: str, row: str) -> str:
    return f"""
        CREATE TRIGGER trg_content_version_{kind}
        AFTER {operation} ON content_version
        FOR EACH ROW
        BEGIN
            INSERT INTO content_version_change ({_INSERT_COLUMNS})
            VALUES ({_values(kind, row)});
        END
    """


_POSTGRESQL_FUNCTION = f"""
    CREATE FUNCTION record_content_version_change() RETURNS trigger AS $$
    BEGIN
        IF TG_OP = 'DELETE' THEN
            INSERT INTO content_version_change ({_INSERT_COLUMNS})
            VALUES ({_values("deleted", "OLD")});
            RETURN OLD;
        ELSIF TG_OP = 'INSERT' THEN
            INSERT INTO content_version_change ({_INSERT_COLUMNS})
            VALUES ({_values("inserted", "NEW")});
        ELSE
            INSERT INTO content_version_change ({_INSERT_COLUMNS})
            VALUES ({_values("updated", "NEW")});
        END IF;
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
"""


def upgrade() -> None:
    op.create_table(
        "content_version_change",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.Column("version_code", sa.String(), nullable=False),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("pathway_id", sa.Integer(), nullable=False),
        sa.Column("version_number", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=True),
        sa.Column("delivery_method", sa.String(), nullable=True),
        sa.Column("drive_link", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("consumed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_content_version_change")),
    )
    op.create_index(
        "ix_content_version_change_consumed_at",
        "content_version_change",
        ["consumed_at"],
        unique=False,
    )

    dialect = op.get_bind().dialect.name
    if dialect == "sqlite":
        op.execute(_sqlite_trigger("INSERT", "inserted", "NEW"))
        op.execute(_sqlite_trigger("UPDATE", "updated", "NEW"))
        op.execute(_sqlite_trigger("DELETE", "deleted", "OLD"))
    elif dialect == "postgresql":
        op.execute(_POSTGRESQL_FUNCTION)
        op.execute(
            "CREATE TRIGGER trg_content_version_change "
            "AFTER INSERT OR UPDATE OR DELETE ON content_version "
            "FOR EACH ROW EXECUTE FUNCTION record_content_version_change()"
        )
    else:
        raise NotImplementedError(f"No content_version change triggers for {dialect}")


def downgrade() -> None:
    dialect = op.get_bind().dialect.name
    if dialect == "sqlite":
        for kind in ("inserted", "updated", "deleted"):
            op.execute(f"DROP TRIGGER IF EXISTS trg_content_version_{kind}")
    elif dialect == "postgresql":
        op.execute("DROP TRIGGER IF EXISTS trg_content_version_change ON content_version")
        op.execute("DROP FUNCTION IF EXISTS record_content_version_change()")
    op.drop_index("ix_content_version_change_consumed_at", table_name="content_version_change")
    op.drop_table("content_version_change")
