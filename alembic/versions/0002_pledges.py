from alembic import op

revision = "0002_pledges"
down_revision = "0001_test_requests"
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
    CREATE TABLE IF NOT EXISTS pledges (
      id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
      test_request_id UUID NOT NULL REFERENCES test_requests(id) ON DELETE CASCADE,
      user_id UUID NULL,
      amount BIGINT NOT NULL CHECK (amount > 0),
      payment_method_id TEXT NOT NULL,
      stripe_customer_id TEXT NULL,
      stripe_payment_intent_id TEXT UNIQUE,
      status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending','charged','failed','cancelled')),
      charged_at TIMESTAMPTZ NULL,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );

    CREATE INDEX IF NOT EXISTS idx_pledges_request_status
      ON pledges(test_request_id, status);
    """
    )


def downgrade():
    op.execute("DROP TABLE IF EXISTS pledges;")
