"""init
Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

from webapp.data.pokemon_seed import POKEMONS

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    pokemons = op.create_table(
        "pokemons",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("ability", sa.String(length=100), nullable=True),
        sa.Column("owner", sa.String(length=100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_pokemons_owner", "pokemons", ["owner"])

    op.create_table(
        "moves",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("pokemon_id", sa.Integer(), sa.ForeignKey("pokemons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("power", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_moves_pokemon_id", "moves", ["pokemon_id"])

    op.bulk_insert(pokemons, POKEMONS)

def downgrade():
    op.drop_index("ix_moves_pokemon_id", table_name="moves")
    op.drop_table("moves")
    op.drop_index("ix_pokemons_owner", table_name="pokemons")
    op.drop_table("pokemons")
