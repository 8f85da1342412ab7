from contextlib import closing
from typing import Any, Dict

import stripe

from pledgeflow.config import Settings
from pledgeflow.errors import GoalNotMet, NotFound
from pledgeflow.models.campaign import get_campaign, set_campaign_status
from pledgeflow.models.pledge import list_for_campaign, mark_charged, mark_failed
from pledgeflow.utils.db import get_db_connection
from pledgeflow.utils.metrics import (
    BOOKKEEPING_FAILURES,
    CAMPAIGN_TRANSITIONS,
    PLEDGE_CHARGES,
)


def charge_idempotency_key(pledge: Dict[str, Any]) -> str:
    # One key per pledge: a re-run after a lost status write replays the
    # original charge, even if the payment method was swapped in between.
    return f"pledge-charge:{pledge['id']}"


# Errors that say this card or payment method cannot pay. Anything else from
# Stripe (network, rate limit, auth, server) leaves the pledge pending.
DECLINE_ERRORS = (stripe.CardError, stripe.InvalidRequestError)


def _create_charge(
    pledge: Dict[str, Any], campaign_id: str, settings: Settings
) -> stripe.PaymentIntent:
    params: Dict[str, Any] = {
        "amount": pledge["amount"],
        "currency": settings.stripe_currency,
        "payment_method": pledge["payment_method_id"],
        "payment_method_types": ["card"],
        "confirm": True,
        "off_session": True,
        "metadata": {
            "pledge_id": str(pledge["id"]),
            "test_request_id": str(campaign_id),
        },
    }
    if pledge.get("stripe_customer_id"):
        params["customer"] = pledge["stripe_customer_id"]
    return stripe.PaymentIntent.create(
        api_key=settings.stripe_secret_key,
        idempotency_key=charge_idempotency_key(pledge),
        **params,
    )


def _record(label: str, table: str, fn, *args) -> bool:
    """Best-effort status write: failures are logged and counted, never raised."""
    try:
        fn(*args)
        return True
    except Exception as e:
        print(f"[charge-pledges] {label} failed: {e}")
        BOOKKEEPING_FAILURES.labels(table=table).inc()
        return False


def _earlier_failures(conn, campaign_id: str) -> bool:
    """True when a previous run left `failed` pledges, or the check itself fails."""
    try:
        earlier = list_for_campaign(conn, campaign_id, ("failed",))
    except Exception as e:
        print(f"[charge-pledges] failed-pledge check for {campaign_id} failed: {e}")
        return True
    if earlier:
        print(
            f"[charge-pledges] test_request={campaign_id} has {len(earlier)} "
            "failed pledges from an earlier run, not promoting"
        )
    return bool(earlier)


def _empty_result(message: str) -> Dict[str, Any]:
    return {
        "message": message,
        "results": {"success": [], "failed": []},
        "summary": {
            "total": 0,
            "successful": 0,
            "failed": 0,
            "total_charged": 0,
            "campaign_funded": False,
        },
    }


def charge_pledges(campaign_id: str, *, settings: Settings) -> Dict[str, Any]:
    """
    Charge every pending pledge of a campaign whose funding goal is met.

    Each pledge is charged independently; a declined card only lands the
    pledge in the `failed` list. Transient Stripe errors are reported too but
    leave the pledge pending for the next run. The campaign is promoted to
    `funded` when nothing failed in this run or an earlier one.
    """
    dsn = settings.require_database()
    settings.require_stripe()

    with closing(get_db_connection(dsn)) as conn:
        camp = get_campaign(conn, campaign_id)
        if not camp:
            raise NotFound("Test request not found")

        if camp["current_funding"] < camp["test_cost"]:
            raise GoalNotMet(camp["current_funding"], camp["test_cost"])

        pledges = list_for_campaign(conn, campaign_id, ("pending",))
        if not pledges:
            return _empty_result("No pending pledges to charge")

        success: list[Dict[str, Any]] = []
        failed: list[Dict[str, Any]] = []

        for pledge in pledges:
            pid = pledge["id"]
            try:
                pi = _create_charge(pledge, campaign_id, settings)
            except DECLINE_ERRORS as e:
                error = e.user_message or str(e)
                print(f"[charge-pledges] pledge {pid} declined: {error}")
                PLEDGE_CHARGES.labels(outcome="failed").inc()
                _record(f"mark pledge {pid} failed", "pledges", mark_failed, conn, pid)
                failed.append({"pledge_id": pid, "error": error, "retryable": False})
                continue
            except stripe.StripeError as e:
                error = e.user_message or str(e)
                print(f"[charge-pledges] pledge {pid} left pending: {error}")
                PLEDGE_CHARGES.labels(outcome="error").inc()
                failed.append({"pledge_id": pid, "error": error, "retryable": True})
                continue

            if pi.status != "succeeded":
                error = f"Payment not completed (status: {pi.status})"
                print(f"[charge-pledges] pledge {pid}: {error}")
                PLEDGE_CHARGES.labels(outcome="failed").inc()
                _record(f"mark pledge {pid} failed", "pledges", mark_failed, conn, pid)
                failed.append({"pledge_id": pid, "error": error, "retryable": False})
                continue

            PLEDGE_CHARGES.labels(outcome="succeeded").inc()
            _record(
                f"mark pledge {pid} charged",
                "pledges",
                mark_charged,
                conn,
                pid,
                pi.id,
            )
            success.append(
                {"pledge_id": pid, "payment_intent_id": pi.id, "amount": pledge["amount"]}
            )

        funded = False
        if not failed and not _earlier_failures(conn, campaign_id):
            funded = _record(
                f"promote test request {campaign_id} to funded",
                "test_requests",
                set_campaign_status,
                conn,
                campaign_id,
                "funded",
            )
            if funded:
                CAMPAIGN_TRANSITIONS.labels(status="funded").inc()

    print(
        f"[charge-pledges] test_request={campaign_id} "
        f"successful={len(success)} failed={len(failed)} funded={funded}"
    )
    return {
        "message": "Pledges processed",
        "results": {"success": success, "failed": failed},
        "summary": {
            "total": len(pledges),
            "successful": len(success),
            "failed": len(failed),
            "total_charged": sum(s["amount"] for s in success),
            "campaign_funded": funded,
        },
    }
