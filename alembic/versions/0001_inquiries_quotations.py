"""inquiries and quotations tables for website lead forms

Revision ID: 0001_inquiries_quotations
Revises:
Create Date: 2026-10-19

"""

from alembic import op

revision = "0001_inquiries_quotations"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE EXTENSION IF NOT EXISTS pgcrypto;

        CREATE TABLE IF NOT EXISTS inquiries (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          name TEXT NOT NULL,
          company TEXT NOT NULL,
          email TEXT NOT NULL,
          message TEXT NOT NULL,
          created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
        CREATE INDEX IF NOT EXISTS idx_inquiries_email ON inquiries(email);
        CREATE INDEX IF NOT EXISTS idx_inquiries_created ON inquiries(created_at);

        CREATE TABLE IF NOT EXISTS quotations (
          id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
          first_name TEXT NOT NULL,
          last_name TEXT NOT NULL,
          email TEXT NOT NULL,
          country TEXT NOT NULL,
          company_name TEXT NOT NULL,
          company_address TEXT NOT NULL,
          preferred_solution TEXT NOT NULL,
          number_of_zones INTEGER NOT NULL CHECK (number_of_zones >= 1),
          created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
        CREATE INDEX IF NOT EXISTS idx_quotations_email ON quotations(email);
        CREATE INDEX IF NOT EXISTS idx_quotations_created ON quotations(created_at);
        """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS quotations; DROP TABLE IF EXISTS inquiries;")
