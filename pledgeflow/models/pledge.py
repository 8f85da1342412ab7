from datetime import datetime
from typing import Any, Iterable

PLEDGE_COLS = [
    "id",
    "test_request_id",
    "user_id",
    "amount",
    "payment_method_id",
    "stripe_customer_id",
    "status",
    "charged_at",
]


def _row_to_pledge(row) -> dict[str, Any]:
    pledge = dict(zip(PLEDGE_COLS, row))
    pledge["amount"] = int(pledge["amount"] or 0)
    return pledge


def list_for_campaign(
    conn, campaign_id: str, statuses: Iterable[str] = ("pending",)
) -> list[dict[str, Any]]:
    sql = """
    SELECT id, test_request_id, user_id, amount, payment_method_id,
           stripe_customer_id, status, charged_at
    FROM pledges
    WHERE test_request_id = %s
      AND status = ANY(%s)
    ORDER BY created_at ASC
    """
    with conn, conn.cursor() as cur:
        cur.execute(sql, (campaign_id, list(statuses)))
        return [_row_to_pledge(r) for r in cur.fetchall()]


def mark_charged(
    conn,
    pledge_id: str,
    payment_intent_id: str | None,
    charged_at: datetime | None = None,
) -> None:
    with conn, conn.cursor() as cur:
        cur.execute(
            """
            UPDATE pledges
            SET status = 'charged',
                charged_at = COALESCE(%s, now()),
                stripe_payment_intent_id = %s
            WHERE id = %s
            """,
            (charged_at, payment_intent_id, pledge_id),
        )


def mark_failed(conn, pledge_id: str) -> None:
    with conn, conn.cursor() as cur:
        cur.execute(
            "UPDATE pledges SET status = 'failed' WHERE id = %s",
            (pledge_id,),
        )


def cancel_pending_for_campaign(conn, campaign_id: str) -> int:
    """Cancel every pending pledge of a campaign; returns how many changed."""
    sql = """
    UPDATE pledges
    SET status = 'cancelled'
    WHERE test_request_id = %s AND status = 'pending'
    RETURNING id
    """
    with conn, conn.cursor() as cur:
        cur.execute(sql, (campaign_id,))
        return len(cur.fetchall())
