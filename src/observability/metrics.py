from __future__ import annotations

from flask import Blueprint, Response
from prometheus_client import Counter, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

TOKEN_EXCHANGES = Counter(
    "previewplayer_token_exchanges_total",
    "Client-credentials exchanges performed against the token endpoint.",
    ["outcome"],
)
TOKEN_CACHE_HITS = Counter(
    "previewplayer_token_cache_hits_total",
    "Token requests served from the in-process cache.",
)
PLAYLIST_LOOKUPS = Counter(
    "previewplayer_playlist_lookups_total",
    "Playlist lookups forwarded to the catalog API.",
    ["outcome"],
)


def record_token_exchange(outcome: str) -> None:
    TOKEN_EXCHANGES.labels(outcome=outcome).inc()


def record_token_cache_hit() -> None:
    TOKEN_CACHE_HITS.inc()


def record_playlist_lookup(outcome: str) -> None:
    PLAYLIST_LOOKUPS.labels(outcome=outcome).inc()


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
