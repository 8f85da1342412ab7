#!/usr/bin/env python3
"""
Seed database with demo test requests and pledges.

Usage: poetry run python scripts/seed.py [--force]
Requires: migrations applied (poetry run alembic upgrade head)

Pledges use Stripe test-mode payment methods, so settlement against the
seeded data only works with a test secret key.
"""
import os
import sys

# Ensure pledgeflow is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from pledgeflow.config import Settings
from pledgeflow.utils.db import get_db_connection

DEMO_PREFIX = "[demo]"


def _insert_request(cur, name: str, funding: int, cost: int, expires: str) -> str:
    cur.execute(
        """
        INSERT INTO test_requests (name, current_funding, test_cost, status, expiration_date)
        VALUES (%s, %s, %s, 'pending', now() + %s::interval)
        RETURNING id
        """,
        (f"{DEMO_PREFIX} {name}", funding, cost, expires),
    )
    return cur.fetchone()[0]


def _insert_pledges(cur, request_id: str, pledges: list[tuple[int, str]]) -> None:
    for amount, pm in pledges:
        cur.execute(
            """
            INSERT INTO pledges (test_request_id, amount, payment_method_id, status)
            VALUES (%s, %s, %s, 'pending')
            """,
            (request_id, amount, pm),
        )


def seed(dsn: str):
    with get_db_connection(dsn) as conn, conn.cursor() as cur:
        cur.execute(
            "SELECT COUNT(*) FROM test_requests WHERE name LIKE %s",
            (f"{DEMO_PREFIX}%",),
        )
        if cur.fetchone()[0] > 0:
            print("Already seeded (demo test requests exist). Use --force to re-seed.")
            return

        # 1. Goal met, both cards good -> settles and becomes funded
        funded_id = _insert_request(cur, "Battery endurance test", 10000, 10000, "7 days")
        _insert_pledges(cur, funded_id, [(5000, "pm_card_visa"), (5000, "pm_card_mastercard")])

        # 2. Goal met, one card declines -> stays pending
        partial_id = _insert_request(cur, "Drop test", 6000, 6000, "7 days")
        _insert_pledges(
            cur, partial_id, [(3000, "pm_card_visa"), (3000, "pm_card_chargeDeclined")]
        )

        # 3. Past deadline, under goal -> expired by the sweep
        expired_id = _insert_request(cur, "Waterproofing test", 2500, 20000, "-1 day")
        _insert_pledges(cur, expired_id, [(1500, "pm_card_visa"), (1000, "pm_card_visa")])

        conn.commit()
        print("Seeded successfully.")
        print(f"  Fundable:         {funded_id}")
        print(f"  Partial decline:  {partial_id}")
        print(f"  Expired/unfunded: {expired_id}")


def force_seed(dsn: str):
    """Clear demo data and re-seed. Use with caution."""
    with get_db_connection(dsn) as conn, conn.cursor() as cur:
        cur.execute(
            """
            DELETE FROM pledges WHERE test_request_id IN (
                SELECT id FROM test_requests WHERE name LIKE %s
            )
            """,
            (f"{DEMO_PREFIX}%",),
        )
        cur.execute("DELETE FROM test_requests WHERE name LIKE %s", (f"{DEMO_PREFIX}%",))
        conn.commit()
    print("Cleared demo data. Seeding...")
    seed(dsn)


if __name__ == "__main__":
    load_dotenv()
    dsn = Settings.from_env().require_database()
    if "--force" in sys.argv:
        force_seed(dsn)
    else:
        seed(dsn)
