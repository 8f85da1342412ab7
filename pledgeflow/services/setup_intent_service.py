from typing import Any, Dict

import stripe

from pledgeflow.config import Settings


def create_setup_intent(
    *,
    amount: Any,
    test_request_id: Any,
    user_email: str | None,
    settings: Settings,
) -> Dict[str, Any]:
    """
    Register a card for later off-session charging.

    Nothing is charged here; the returned client secret lets the browser
    confirm the SetupIntent, after which the pledge is recorded elsewhere.
    """
    si = stripe.SetupIntent.create(
        api_key=settings.require_stripe(),
        payment_method_types=["card"],
        usage="off_session",
        metadata={
            "amount": str(amount),
            "test_request_id": str(test_request_id),
            "user_email": user_email or "",
        },
    )
    return {"client_secret": si.client_secret, "setup_intent_id": si.id}
