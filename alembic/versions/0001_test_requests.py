from alembic import op

revision = "0001_test_requests"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
    CREATE TABLE IF NOT EXISTS test_requests (
      id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
      name TEXT NOT NULL,
      current_funding BIGINT NOT NULL DEFAULT 0 CHECK (current_funding >= 0),
      test_cost BIGINT NOT NULL CHECK (test_cost > 0),
      status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending','funded','expired')),
      expiration_date TIMESTAMPTZ NOT NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );

    CREATE INDEX IF NOT EXISTS idx_test_requests_status_expiration
      ON test_requests(status, expiration_date);
    """
    )


def downgrade():
    op.execute("DROP TABLE IF EXISTS test_requests;")
