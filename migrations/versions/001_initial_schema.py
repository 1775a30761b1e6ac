"""Initial schema with PostGIS extension and the tour planning tables.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # Enable PostGIS extension
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column(
            "role",
            sa.Enum("BUYER", "REALTOR", "ADMIN", name="userrole"),
            default="BUYER",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── houses ────────────────────────────────────────────────────────
    op.create_table(
        "houses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(120), nullable=False),
        sa.Column("state", sa.String(64), nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("location", Geometry("POINT", srid=4326), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_houses_location", "houses", ["location"], postgresql_using="gist"
    )

    # ── tours ─────────────────────────────────────────────────────────
    op.create_table(
        "tours",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "realtor_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "buyer_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True
        ),
        sa.Column(
            "status",
            sa.Enum(
                "PLANNED",
                "IN_PROGRESS",
                "COMPLETED",
                "CANCELLED",
                name="tourstatus",
            ),
            default="PLANNED",
            nullable=False,
        ),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_tours_realtor", "tours", ["realtor_id"])
    op.create_index("idx_tours_buyer", "tours", ["buyer_id"])
    op.create_index("idx_tours_status", "tours", ["status"])

    # ── tour_stops ────────────────────────────────────────────────────
    op.create_table(
        "tour_stops",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "tour_id", sa.Integer, sa.ForeignKey("tours.id"), nullable=False
        ),
        sa.Column(
            "house_id", sa.Integer, sa.ForeignKey("houses.id"), nullable=False
        ),
        sa.Column("order_index", sa.Integer, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "idx_tour_stops_order", "tour_stops", ["tour_id", "order_index"]
    )
    op.create_index("idx_tour_stops_house", "tour_stops", ["house_id"])


def downgrade() -> None:
    op.drop_table("tour_stops")
    op.drop_table("tours")
    op.drop_table("houses")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS tourstatus")
    op.execute("DROP TYPE IF EXISTS userrole")
