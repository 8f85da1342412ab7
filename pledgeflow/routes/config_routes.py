from flask import Blueprint, current_app, jsonify

config_bp = Blueprint("config", __name__)


@config_bp.route("/config", methods=["GET", "POST"])
def public_config():
    """
    Public values for the browser: Supabase URL + anon key and the Stripe
    publishable key. Server-only credentials never leave this process.
    """
    settings = current_app.config["SETTINGS"]
    out = {
        "supabaseUrl": settings.supabase_url,
        "supabaseKey": settings.supabase_anon_key,
        "stripePublishableKey": settings.stripe_publishable_key,
    }
    if settings.config_debug:
        out["debug"] = {
            "hasUrl": bool(settings.supabase_url),
            "hasKey": bool(settings.supabase_anon_key),
            "hasStripeKey": bool(settings.stripe_publishable_key),
        }
    resp = jsonify(out)
    resp.headers["Access-Control-Allow-Origin"] = "*"
    return resp, 200
