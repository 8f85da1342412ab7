from flask import Blueprint, Response
from prometheus_client import REGISTRY, generate_latest, CONTENT_TYPE_LATEST

from pledgeflow.utils.authz import require_cron_secret

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("/admin/metrics")
@require_cron_secret
def metrics():
    """Prometheus metrics endpoint. Requires the cron bearer secret."""
    return Response(
        generate_latest(REGISTRY),
        mimetype=CONTENT_TYPE_LATEST,
    )
