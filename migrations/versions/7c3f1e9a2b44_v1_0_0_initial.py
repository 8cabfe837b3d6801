"""v1_0_0_initial

Revision ID: 7c3f1e9a2b44
Revises:
Create Date: 2026-10-19 10:12:41.518227

"""

from alembic import op
import sqlalchemy as sa


from app.database import get_db_schema

# revision identifiers, used by Alembic.
revision = "7c3f1e9a2b44"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "contract_state",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_address", sa.String(length=42), nullable=False),
        sa.Column("paused", sa.Boolean(), nullable=False),
        sa.Column("treasury_address", sa.String(length=42), nullable=False),
        sa.Column("hts_manager_address", sa.String(length=42), nullable=False),
        sa.Column("contract_address", sa.String(length=42), nullable=False),
        sa.Column("implementation_address", sa.String(length=42), nullable=True),
        sa.Column("schema_version", sa.Integer(), nullable=False),
        sa.Column("next_bond_id", sa.BigInteger(), nullable=False),
        sa.Column("reentrancy_status", sa.Integer(), nullable=False),
        sa.Column("collected_issue_fees", sa.BigInteger(), nullable=False),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("modified", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema=get_db_schema(),
    )
    op.create_table(
        "contract_event",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event", sa.String(length=50), nullable=False),
        sa.Column("args", sa.JSON(), nullable=False),
        sa.Column("block_timestamp", sa.BigInteger(), nullable=False),
        sa.Column("recorded_datetime", sa.DateTime(), nullable=True),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("modified", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema=get_db_schema(),
    )
    op.create_index(
        op.f("ix_contract_event_event"),
        "contract_event",
        ["event"],
        unique=False,
        schema=get_db_schema(),
    )
    op.create_table(
        "issuer",
        sa.Column("issuer_address", sa.String(length=42), nullable=False),
        sa.Column("wallet_address", sa.String(length=42), nullable=False),
        sa.Column("kyc_approved", sa.Boolean(), nullable=False),
        sa.Column("connected", sa.Boolean(), nullable=False),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("modified", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("issuer_address"),
        schema=get_db_schema(),
    )
    op.create_table(
        "bond",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("issuer_address", sa.String(length=42), nullable=False),
        sa.Column("interest_rate_bp", sa.BigInteger(), nullable=False),
        sa.Column("coupon_rate_bp", sa.BigInteger(), nullable=False),
        sa.Column("face_value", sa.BigInteger(), nullable=False),
        sa.Column("available_units", sa.BigInteger(), nullable=False),
        sa.Column("target_usd", sa.BigInteger(), nullable=False),
        sa.Column("duration_sec", sa.BigInteger(), nullable=False),
        sa.Column("maturity_timestamp", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("hts_token_id", sa.LargeBinary(length=20), nullable=True),
        sa.Column("issued_units", sa.BigInteger(), nullable=False),
        sa.Column("schema_version", sa.Integer(), nullable=False),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("modified", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema=get_db_schema(),
    )
    op.create_index(
        op.f("ix_bond_issuer_address"),
        "bond",
        ["issuer_address"],
        unique=False,
        schema=get_db_schema(),
    )
    op.create_table(
        "hbar_account",
        sa.Column("account_address", sa.String(length=42), nullable=False),
        sa.Column("balance", sa.BigInteger(), nullable=False),
        sa.Column("accepts_hbar", sa.Boolean(), nullable=False),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("modified", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("account_address"),
        schema=get_db_schema(),
    )
    op.create_table(
        "hts_token",
        sa.Column("token_num", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("token_address", sa.String(length=42), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("symbol", sa.String(length=100), nullable=False),
        sa.Column("memo", sa.String(length=100), nullable=False),
        sa.Column("treasury_address", sa.String(length=42), nullable=False),
        sa.Column("total_supply", sa.BigInteger(), nullable=False),
        sa.Column("decimals", sa.Integer(), nullable=False),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("modified", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("token_num"),
        sa.UniqueConstraint("token_address"),
        schema=get_db_schema(),
    )
    op.create_table(
        "hts_token_balance",
        sa.Column("token_address", sa.String(length=42), nullable=False),
        sa.Column("account_address", sa.String(length=42), nullable=False),
        sa.Column("balance", sa.BigInteger(), nullable=False),
        sa.Column("created", sa.DateTime(), nullable=True),
        sa.Column("modified", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("token_address", "account_address"),
        schema=get_db_schema(),
    )


def downgrade():
    op.drop_table("hts_token_balance", schema=get_db_schema())
    op.drop_table("hts_token", schema=get_db_schema())
    op.drop_table("hbar_account", schema=get_db_schema())
    op.drop_index(
        op.f("ix_bond_issuer_address"), table_name="bond", schema=get_db_schema()
    )
    op.drop_table("bond", schema=get_db_schema())
    op.drop_table("issuer", schema=get_db_schema())
    op.drop_index(
        op.f("ix_contract_event_event"),
        table_name="contract_event",
        schema=get_db_schema(),
    )
    op.drop_table("contract_event", schema=get_db_schema())
    op.drop_table("contract_state", schema=get_db_schema())
