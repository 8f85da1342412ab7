from flask import Blueprint, current_app, jsonify, request

from pledgeflow.errors import BadRequest, NotFound
from pledgeflow.services.settlement_service import charge_pledges
from pledgeflow.services.setup_intent_service import create_setup_intent
from pledgeflow.utils.ids import parse_uuid
from pledgeflow.utils.rate_limit import rate_limited

pledges_bp = Blueprint("pledges", __name__)


# POST /charge-pledges  { test_request_id }
@pledges_bp.post("/charge-pledges")
def charge():
    body = request.get_json(force=True, silent=True) or {}
    test_request_id = body.get("test_request_id")
    if not test_request_id:
        raise BadRequest("Missing test_request_id")
    campaign_id = parse_uuid(test_request_id)
    if campaign_id is None:
        raise NotFound("Test request not found")

    resp = charge_pledges(campaign_id, settings=current_app.config["SETTINGS"])
    return jsonify(resp), 200


# POST /create-setup-intent  { amount, test_request_id, user_email? }
@pledges_bp.post("/create-setup-intent")
@rate_limited("setup-intent")
def setup_intent():
    settings = current_app.config["SETTINGS"]
    settings.require_stripe()

    body = request.get_json(force=True, silent=True) or {}
    amount = body.get("amount")
    test_request_id = body.get("test_request_id")
    user_email = body.get("user_email")
    if user_email is not None and not isinstance(user_email, str):
        raise BadRequest("user_email must be a string")
    user_email = (user_email or "").strip() or None
    if not amount or not test_request_id:
        raise BadRequest("Missing required fields")
    try:
        if float(amount) <= 0:
            raise BadRequest("amount must be > 0")
    except (TypeError, ValueError):
        raise BadRequest("amount must be a number")

    resp = create_setup_intent(
        amount=amount,
        test_request_id=test_request_id,
        user_email=user_email,
        settings=settings,
    )
    return jsonify(resp), 200
