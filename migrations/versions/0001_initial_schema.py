"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("address", sa.String(200), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("created_by", sa.String(30), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "customer_id", sa.Integer(),
            sa.ForeignKey("customers.id"), nullable=False,
        ),
        sa.Column(
            "account_type",
            sa.Enum(
                "CHECKING", "SAVINGS",
                name="account_type_enum", create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "ACTIVE", "FROZEN", "CLOSED",
                name="account_status_enum", create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "balance >= 0", name="ck_accounts_balance_non_negative"
        ),
    )
    op.create_index("ix_accounts_customer_id", "accounts", ["customer_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "account_id", sa.Integer(),
            sa.ForeignKey("accounts.id"), nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "transaction_type",
            sa.Enum(
                "DEPOSIT", "WITHDRAWAL",
                name="transaction_type_enum", create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING_APPROVAL", "APPROVED",
                name="transaction_status_enum", create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column("created_by", sa.String(30), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("approved_by", sa.String(30), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("principal", sa.String(30), nullable=False),
        sa.Column("action_type", sa.String(50), nullable=False),
        sa.Column("affected_entity", sa.String(30), nullable=False),
        sa.Column("affected_id", sa.Integer(), nullable=True),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("origin", sa.String(45), nullable=True),
    )
    op.create_index("ix_audit_logs_principal", "audit_logs", ["principal"])
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])

    op.create_table(
        "role_memberships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("principal", sa.String(30), nullable=False),
        sa.Column("role", sa.String(30), nullable=False),
        sa.Column("granted_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("principal", "role", name="uq_role_membership"),
    )
    op.create_index(
        "ix_role_memberships_principal", "role_memberships", ["principal"]
    )


def downgrade() -> None:
    op.drop_table("role_memberships")
    op.drop_table("audit_logs")
    op.drop_table("transactions")
    op.drop_table("accounts")
    op.drop_table("customers")
    for enum_name in (
        "transaction_status_enum",
        "transaction_type_enum",
        "account_status_enum",
        "account_type_enum",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
