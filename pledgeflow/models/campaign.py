from typing import Any

CAMPAIGN_COLS = [
    "id",
    "name",
    "current_funding",
    "test_cost",
    "status",
    "expiration_date",
]


def _row_to_campaign(row) -> dict[str, Any]:
    camp = dict(zip(CAMPAIGN_COLS, row))
    camp["current_funding"] = int(camp["current_funding"] or 0)
    camp["test_cost"] = int(camp["test_cost"] or 0)
    return camp


def get_campaign(conn, campaign_id: str) -> dict[str, Any] | None:
    sql = """
    SELECT id, name, current_funding, test_cost, status, expiration_date
    FROM test_requests
    WHERE id = %s
    """
    with conn, conn.cursor() as cur:
        cur.execute(sql, (campaign_id,))
        row = cur.fetchone()
        if not row:
            return None
        return _row_to_campaign(row)


def list_expired_pending(conn) -> list[dict[str, Any]]:
    """Pending campaigns whose expiration_date is strictly in the past."""
    sql = """
    SELECT id, name, current_funding, test_cost, status, expiration_date
    FROM test_requests
    WHERE status = 'pending'
      AND expiration_date < now()
    ORDER BY expiration_date ASC
    """
    with conn, conn.cursor() as cur:
        cur.execute(sql)
        return [_row_to_campaign(r) for r in cur.fetchall()]


def expire_if_unfunded(conn, campaign_id: str) -> bool:
    """
    Expire a campaign only if it is still pending and under goal at write
    time. Returns False when a concurrent funding or promotion got there first.
    """
    sql = """
    UPDATE test_requests
    SET status = 'expired'
    WHERE id = %s
      AND status = 'pending'
      AND current_funding < test_cost
    """
    with conn, conn.cursor() as cur:
        cur.execute(sql, (campaign_id,))
        return cur.rowcount > 0


def set_campaign_status(conn, campaign_id: str, status: str) -> bool:
    with conn, conn.cursor() as cur:
        cur.execute(
            "UPDATE test_requests SET status = %s WHERE id = %s",
            (status, campaign_id),
        )
        return cur.rowcount > 0
