"""Initial catalog schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "client",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_client")),
        sa.UniqueConstraint("client_name", name=op.f("uq_client_client_name")),
    )
    op.create_table(
        "programme",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("programme_name", sa.String(), nullable=False),
        sa.Column("programme_type", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_programme")),
        sa.UniqueConstraint("programme_name", name=op.f("uq_programme_programme_name")),
    )
    op.create_table(
        "module",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("programme_id", sa.Integer(), nullable=False),
        sa.Column("module_name", sa.String(), nullable=False),
        sa.Column("module_number", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["programme_id"],
            ["programme.id"],
            name=op.f("fk_module_programme_id_programme"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_module")),
        sa.UniqueConstraint(
            "programme_id", "module_name", name=op.f("uq_module_programme_id_module_name")
        ),
    )
    op.create_table(
        "class",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("module_id", sa.Integer(), nullable=False),
        sa.Column("class_name", sa.String(), nullable=False),
        sa.Column("class_number", sa.Integer(), nullable=True),
        sa.Column("material_type", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["module_id"], ["module.id"], name=op.f("fk_class_module_id_module")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_class")),
        sa.UniqueConstraint("module_id", "class_name", name=op.f("uq_class_module_id_class_name")),
    )
    op.create_table(
        "client_pathway",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("programme_id", sa.Integer(), nullable=False),
        sa.Column("cohort_name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["client_id"], ["client.id"], name=op.f("fk_client_pathway_client_id_client")
        ),
        sa.ForeignKeyConstraint(
            ["programme_id"],
            ["programme.id"],
            name=op.f("fk_client_pathway_programme_id_programme"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_client_pathway")),
        sa.UniqueConstraint(
            "client_id",
            "programme_id",
            "cohort_name",
            name=op.f("uq_client_pathway_client_id_programme_id_cohort_name"),
        ),
    )
    op.create_table(
        "content_version",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("pathway_id", sa.Integer(), nullable=False),
        sa.Column("version_code", sa.String(), nullable=False),
        sa.Column("version_number", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("delivery_method", sa.String(), nullable=False),
        sa.Column("drive_link", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["class_id"], ["class.id"], name=op.f("fk_content_version_class_id_class")
        ),
        sa.ForeignKeyConstraint(
            ["pathway_id"],
            ["client_pathway.id"],
            name=op.f("fk_content_version_pathway_id_client_pathway"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_content_version")),
        sa.UniqueConstraint(
            "class_id",
            "pathway_id",
            "version_number",
            name=op.f("uq_content_version_class_id_pathway_id_version_number"),
        ),
    )
    op.create_index(
        "ix_content_version_version_code", "content_version", ["version_code"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_content_version_version_code", table_name="content_version")
    op.drop_table("content_version")
    op.drop_table("client_pathway")
    op.drop_table("class")
    op.drop_table("module")
    op.drop_table("programme")
    op.drop_table("client")
