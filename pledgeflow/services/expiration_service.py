from contextlib import closing
from typing import Any, Dict

from pledgeflow.config import Settings
from pledgeflow.models.campaign import expire_if_unfunded, list_expired_pending
from pledgeflow.models.pledge import cancel_pending_for_campaign
from pledgeflow.utils.db import get_db_connection
from pledgeflow.utils.metrics import (
    BOOKKEEPING_FAILURES,
    CAMPAIGN_TRANSITIONS,
    PLEDGES_CANCELLED,
)


def expire_campaigns(*, settings: Settings) -> Dict[str, Any]:
    """
    Expire pending test requests past their deadline that never reached
    their goal, and cancel their pending pledges.

    Campaigns that met their goal are left pending even when expired; they
    are waiting on settlement, not on the sweep.
    """
    dsn = settings.require_database()
    results: Dict[str, Any] = {
        "expired_count": 0,
        "pledges_cancelled": 0,
        "details": [],
        "skipped": [],
    }

    with closing(get_db_connection(dsn)) as conn:
        candidates = list_expired_pending(conn)
        if not candidates:
            return {
                "success": True,
                "message": "No expired test requests found",
                "results": results,
            }

        for camp in candidates:
            cid = camp["id"]
            if camp["current_funding"] >= camp["test_cost"]:
                results["skipped"].append(cid)
                continue

            try:
                expired = expire_if_unfunded(conn, cid)
            except Exception as e:
                print(f"[expire-pledges] could not expire test request {cid}: {e}")
                BOOKKEEPING_FAILURES.labels(table="test_requests").inc()
                continue
            if not expired:
                # funded or promoted since the candidate query ran
                print(f"[expire-pledges] test request {cid} no longer eligible, skipped")
                results["skipped"].append(cid)
                continue
            CAMPAIGN_TRANSITIONS.labels(status="expired").inc()

            try:
                cancelled = cancel_pending_for_campaign(conn, cid)
            except Exception as e:
                print(f"[expire-pledges] could not cancel pledges for {cid}: {e}")
                BOOKKEEPING_FAILURES.labels(table="pledges").inc()
                cancelled = 0
            PLEDGES_CANCELLED.inc(cancelled)

            results["expired_count"] += 1
            results["pledges_cancelled"] += cancelled
            results["details"].append(
                {
                    "test_request_id": cid,
                    "name": camp.get("name"),
                    "pledges_cancelled": cancelled,
                }
            )

    print(
        f"[expire-pledges] expired={results['expired_count']} "
        f"pledges_cancelled={results['pledges_cancelled']} "
        f"skipped={len(results['skipped'])}"
    )
    return {
        "success": True,
        "message": "Expiration check completed",
        "results": results,
    }
