"""Initial schema: authorities, services, interactions, service_interactions, links

Revision ID: 3c1f9a7d2b40
Revises:
Create Date: 2026-10-18 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ("ok", "broken", "missing", "unchecked")
TIERS = ("county", "district", "unitary")


def upgrade() -> None:
    bind = op.get_bind()
    is_sqlite = bind.dialect.name == "sqlite"

    if is_sqlite:
        now = sa.text("(datetime('now'))")
        timestamp_type = sa.DateTime()
    else:
        now = sa.text("now()")
        timestamp_type = sa.DateTime(timezone=True)

    status_type = sa.Enum(*STATUSES, name="linkstatus", native_enum=False, length=20)
    tier_type = sa.Enum(*TIERS, name="tier", native_enum=False, length=20)

    def timestamps() -> list[sa.Column]:
        return [
            sa.Column("created_at", timestamp_type, server_default=now, nullable=False),
            sa.Column("updated_at", timestamp_type, server_default=now, nullable=False),
        ]

    def link_state() -> list[sa.Column]:
        return [
            sa.Column("status", status_type, nullable=True),
            sa.Column("link_last_checked", timestamp_type, nullable=True),
            sa.Column("link_errors", sa.JSON(), nullable=False),
            sa.Column("link_warnings", sa.JSON(), nullable=False),
            sa.Column("problem_summary", sa.String(length=500), nullable=True),
            sa.Column("suggested_fix", sa.String(length=500), nullable=True),
        ]

    op.create_table(
        "authorities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("gss", sa.String(length=20), nullable=False),
        sa.Column("snac", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("homepage_url", sa.String(length=2048), nullable=True),
        sa.Column("tier", tier_type, nullable=False),
        sa.Column("parent_authority_id", sa.Integer(), nullable=True),
        *link_state(),
        sa.Column("broken_link_count", sa.Integer(), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(["parent_authority_id"], ["authorities.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("gss"),
        sa.UniqueConstraint("snac"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index(op.f("ix_authorities_homepage_url"), "authorities", ["homepage_url"], unique=False)
    op.create_index(
        op.f("ix_authorities_parent_authority_id"), "authorities", ["parent_authority_id"], unique=False
    )

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lgsl_code", sa.Integer(), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("broken_link_count", sa.Integer(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lgsl_code"),
        sa.UniqueConstraint("label"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "service_tiers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("tier", tier_type, nullable=False),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("service_id", "tier", name="uq_service_tiers_service_tier"),
    )
    op.create_index(op.f("ix_service_tiers_service_id"), "service_tiers", ["service_id"], unique=False)
    op.create_index(op.f("ix_service_tiers_tier"), "service_tiers", ["tier"], unique=False)

    op.create_table(
        "interactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lgil_code", sa.Integer(), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lgil_code"),
        sa.UniqueConstraint("label"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "service_interactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("interaction_id", sa.Integer(), nullable=False),
        sa.Column("govuk_slug", sa.String(length=255), nullable=True),
        sa.Column("govuk_title", sa.String(length=500), nullable=True),
        sa.Column("live", sa.Boolean(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
        sa.ForeignKeyConstraint(["interaction_id"], ["interactions.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "service_id", "interaction_id", name="uq_service_interactions_service_interaction"
        ),
    )
    op.create_index(op.f("ix_service_interactions_service_id"), "service_interactions", ["service_id"], unique=False)
    op.create_index(op.f("ix_service_interactions_interaction_id"), "service_interactions", ["interaction_id"], unique=False)
    op.create_index(op.f("ix_service_interactions_govuk_slug"), "service_interactions", ["govuk_slug"], unique=False)

    op.create_table(
        "links",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("authority_id", sa.Integer(), nullable=False),
        sa.Column("service_interaction_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=True),
        sa.Column("analytics", sa.Integer(), nullable=False),
        *link_state(),
        *timestamps(),
        sa.ForeignKeyConstraint(["authority_id"], ["authorities.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["service_interaction_id"], ["service_interactions.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "authority_id",
            "service_interaction_id",
            name="uq_links_authority_service_interaction",
        ),
    )
    op.create_index(op.f("ix_links_authority_id"), "links", ["authority_id"], unique=False)
    op.create_index(op.f("ix_links_service_interaction_id"), "links", ["service_interaction_id"], unique=False)
    op.create_index(op.f("ix_links_url"), "links", ["url"], unique=False)
    op.create_index(op.f("ix_links_status"), "links", ["status"], unique=False)
    op.create_index(op.f("ix_links_analytics"), "links", ["analytics"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_links_analytics"), table_name="links")
    op.drop_index(op.f("ix_links_status"), table_name="links")
    op.drop_index(op.f("ix_links_url"), table_name="links")
    op.drop_index(op.f("ix_links_service_interaction_id"), table_name="links")
    op.drop_index(op.f("ix_links_authority_id"), table_name="links")
    op.drop_table("links")
    op.drop_index(op.f("ix_service_interactions_govuk_slug"), table_name="service_interactions")
    op.drop_index(op.f("ix_service_interactions_interaction_id"), table_name="service_interactions")
    op.drop_index(op.f("ix_service_interactions_service_id"), table_name="service_interactions")
    op.drop_table("service_interactions")
    op.drop_table("interactions")
    op.drop_index(op.f("ix_service_tiers_tier"), table_name="service_tiers")
    op.drop_index(op.f("ix_service_tiers_service_id"), table_name="service_tiers")
    op.drop_table("service_tiers")
    op.drop_table("services")
    op.drop_index(op.f("ix_authorities_parent_authority_id"), table_name="authorities")
    op.drop_index(op.f("ix_authorities_homepage_url"), table_name="authorities")
    op.drop_table("authorities")
