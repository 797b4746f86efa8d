# mypy: ignore-errors
"""
Migration Alembic créant les tables des configurations d'affichage.

Tables: `configurations` (nom machine unique), `fields` (clé composite configuration + champ Solr)
et `content_model_links` (liens sans contrainte d'unicité).
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Crée les trois tables et leurs index."""
    op.create_table(
        "configurations",
        sa.Column("configuration_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("configuration_name", sa.String(length=255), nullable=False),
        sa.Column("machine_name", sa.String(length=255), nullable=False),
        sa.Column("description_field", sa.String(length=255), nullable=True),
        sa.Column("description_label", sa.String(length=255), nullable=True),
        sa.Column("description_data", sa.LargeBinary(), nullable=True),
        sa.UniqueConstraint("machine_name", name="uq_configurations_machine_name"),
    )
    op.create_table(
        "fields",
        sa.Column("configuration_id", sa.Integer(), nullable=False),
        sa.Column("solr_field", sa.String(length=255), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("data", sa.LargeBinary(), nullable=True),
        sa.PrimaryKeyConstraint("configuration_id", "solr_field"),
    )
    op.create_index(
        "idx_fields_configuration_weight", "fields", ["configuration_id", "weight"]
    )
    op.create_table(
        "content_model_links",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("configuration_id", sa.Integer(), nullable=False),
        sa.Column("cmodel", sa.String(length=255), nullable=False),
    )
    op.create_index(
        "idx_cmodel_links_configuration", "content_model_links", ["configuration_id"]
    )
    op.create_index("idx_cmodel_links_cmodel", "content_model_links", ["cmodel"])


def downgrade() -> None:
    """Supprime les tables (enfants d'abord)."""
    op.drop_index("idx_cmodel_links_cmodel", table_name="content_model_links")
    op.drop_index("idx_cmodel_links_configuration", table_name="content_model_links")
    op.drop_table("content_model_links")
    op.drop_index("idx_fields_configuration_weight", table_name="fields")
    op.drop_table("fields")
    op.drop_table("configurations")
