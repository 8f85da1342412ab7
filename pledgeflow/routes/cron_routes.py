from flask import Blueprint, current_app, jsonify, request

from pledgeflow.errors import BadRequest, NotFound
from pledgeflow.services.expiration_service import expire_campaigns
from pledgeflow.services.reconcile_service import reconcile_pledges
from pledgeflow.utils.authz import require_cron_secret
from pledgeflow.utils.ids import parse_uuid

cron_bp = Blueprint("cron", __name__)


# Scheduled: Authorization: Bearer <CRON_SECRET>
@cron_bp.route("/expire-pledges", methods=["GET", "POST"])
@require_cron_secret
def expire():
    resp = expire_campaigns(settings=current_app.config["SETTINGS"])
    return jsonify(resp), 200


# POST /reconcile-pledges  { test_request_id }
@cron_bp.post("/reconcile-pledges")
@require_cron_secret
def reconcile():
    body = request.get_json(force=True, silent=True) or {}
    test_request_id = body.get("test_request_id")
    if not test_request_id:
        raise BadRequest("Missing test_request_id")
    campaign_id = parse_uuid(test_request_id)
    if campaign_id is None:
        raise NotFound("Test request not found")

    resp = reconcile_pledges(campaign_id, settings=current_app.config["SETTINGS"])
    return jsonify(resp), 200
