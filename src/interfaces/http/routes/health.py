from __future__ import annotations

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health_bp", __name__)


@health_bp.route("/healthz")
def healthz():
    checks = {}

    credentials = current_app.extensions.get("credential_provider")
    configured = bool(credentials and credentials.configured)
    checks["credentials"] = "configured" if configured else "missing"
    checks["token_cached"] = bool(credentials and credentials.cached_token)

    overall = "ok" if configured else "degraded"
    return jsonify({"status": overall, "checks": checks}), 200
