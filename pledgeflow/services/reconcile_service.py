"""
Reconciliation of pledge records against Stripe.

A settlement run can charge a card and then fail to write the pledge's
`charged` status. Such pledges stay `pending` or `failed` locally while the
money has moved. This pass looks up succeeded PaymentIntents by the
`pledge_id` metadata every charge carries and repairs the records.
"""

from contextlib import closing
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe

from pledgeflow.config import Settings
from pledgeflow.errors import NotFound
from pledgeflow.models.campaign import get_campaign, set_campaign_status
from pledgeflow.models.pledge import list_for_campaign, mark_charged
from pledgeflow.utils.db import get_db_connection
from pledgeflow.utils.metrics import CAMPAIGN_TRANSITIONS, PLEDGES_RECONCILED


def find_succeeded_charge(pledge_id: str, settings: Settings) -> Optional[Any]:
    result = stripe.PaymentIntent.search(
        query=f"metadata['pledge_id']:'{pledge_id}' AND status:'succeeded'",
        limit=1,
        api_key=settings.stripe_secret_key,
    )
    return result.data[0] if result.data else None


def reconcile_pledges(campaign_id: str, *, settings: Settings) -> Dict[str, Any]:
    dsn = settings.require_database()
    settings.require_stripe()

    reconciled: list[Dict[str, Any]] = []
    unchanged: list[str] = []
    errors: list[Dict[str, Any]] = []

    with closing(get_db_connection(dsn)) as conn:
        camp = get_campaign(conn, campaign_id)
        if not camp:
            raise NotFound("Test request not found")

        pledges = list_for_campaign(conn, campaign_id, ("pending", "failed"))
        for pledge in pledges:
            pid = pledge["id"]
            try:
                pi = find_succeeded_charge(pid, settings)
            except stripe.StripeError as e:
                print(f"[reconcile-pledges] lookup for pledge {pid} failed: {e}")
                errors.append({"pledge_id": pid, "error": e.user_message or str(e)})
                continue
            if pi is None:
                unchanged.append(pid)
                continue

            charged_at = datetime.fromtimestamp(pi.created, tz=timezone.utc)
            mark_charged(conn, pid, pi.id, charged_at)
            PLEDGES_RECONCILED.inc()
            reconciled.append(
                {"pledge_id": pid, "payment_intent_id": pi.id, "amount": pledge["amount"]}
            )

        funded = False
        if (
            camp["status"] == "pending"
            and camp["current_funding"] >= camp["test_cost"]
            and not unchanged
            and not errors
        ):
            set_campaign_status(conn, campaign_id, "funded")
            CAMPAIGN_TRANSITIONS.labels(status="funded").inc()
            funded = True

    print(
        f"[reconcile-pledges] test_request={campaign_id} "
        f"reconciled={len(reconciled)} unchanged={len(unchanged)} errors={len(errors)}"
    )
    return {
        "message": "Reconciliation completed",
        "results": {"reconciled": reconciled, "unchanged": unchanged, "errors": errors},
        "summary": {
            "checked": len(pledges),
            "reconciled": len(reconciled),
            "campaign_funded": funded,
        },
    }
