import os
import logging
import threading
import time
from collections import defaultdict, deque
from datetime import datetime
from typing import Optional
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Flask specific imports ---
from flask import Flask, request, jsonify, g
from flask_cors import CORS

# --- Import our configuration and the catalog services ---
from config import Config
from src.settings import AppSettings, load_app_settings
from src.domain.catalog import CredentialProvider, PlaylistResolver
from src.interfaces.http.routes import spotify_bp, health_bp
from src.observability import configure_structured_logging, metrics_blueprint


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str) -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set
      - Werkzeug/Flask loggers routed to root (no extra console spam)

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_filename = f"log-{timestamp}"
    log_path = os.path.join(log_dir, log_filename)

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Preserve structured handlers; remove existing FileHandlers to avoid duplicates
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # File: INFO and above
    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        # If console logging is enabled, keep it concise: warnings and above
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    # Quiet Flask/Werkzeug own console handlers; let them propagate to root
    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def build_credential_provider(settings: AppSettings) -> CredentialProvider:
    return CredentialProvider(
        settings.spotify_client_id,
        settings.spotify_client_secret,
        token_url=settings.token_url,
        expiry_margin_seconds=settings.token_expiry_margin_seconds,
        timeout=settings.upstream_timeout_seconds,
    )


def _install_rate_limiter(app: Flask, limit: int, window: int) -> None:
    rate_limit_state = {
        'lock': threading.RLock(),
        'buckets': defaultdict(deque),
    }
    app.extensions['rate_limiter'] = rate_limit_state

    @app.before_request
    def _apply_rate_limit():
        # Skip rate limiting for CORS preflight
        if request.method == "OPTIONS":
            return None
        identifier = (
            request.headers.get('X-Forwarded-For', '')
            or request.remote_addr
            or 'unknown'
        ).split(',')[0].strip()
        now = time.time()
        with rate_limit_state['lock']:
            bucket = rate_limit_state['buckets'][identifier]
            threshold = now - window
            while bucket and bucket[0] <= threshold:
                bucket.popleft()
            if len(bucket) >= limit:
                app.logger.warning(
                    "Rate limit exceeded",
                    extra={"policy": "rate_limit", "ip": identifier, "path": request.path},
                )
                return jsonify(
                    {
                        "error": "Too many requests. Please slow down.",
                        "policy": "rate_limit",
                    }
                ), 429
            bucket.append(now)
        return None


def create_app(
    settings: Optional[AppSettings] = None,
    credential_provider: Optional[CredentialProvider] = None,
    playlist_resolver: Optional[PlaylistResolver] = None,
):
    settings = settings or load_app_settings()

    app = Flask(__name__)
    app.config.from_object(Config)
    app.config['APP_SETTINGS'] = settings
    configure_structured_logging(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    allowed_origins = sorted({
        origin.strip()
        for origin in settings.cors_allowed_origins
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

    if (
        settings.enable_rate_limiting
        and settings.rate_limit_requests > 0
        and settings.rate_limit_window_seconds > 0
    ):
        _install_rate_limiter(app, settings.rate_limit_requests, settings.rate_limit_window_seconds)

    # One credential provider per process, shared by reference with the resolver
    credentials = credential_provider or build_credential_provider(settings)
    resolver = playlist_resolver or PlaylistResolver(
        credentials,
        api_base_url=settings.api_base_url,
        timeout=settings.upstream_timeout_seconds,
    )
    app.extensions['credential_provider'] = credentials
    app.extensions['playlist_resolver'] = resolver

    if not credentials.configured:
        app.logger.warning(
            "Spotify client ID or secret not set; playlist lookups will fail until "
            "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET are provided."
        )

    # --- Register Blueprints ---
    app.register_blueprint(spotify_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_blueprint)

    return app


if __name__ == '__main__':
    # Configure logging:
    # - In debug with reloader: only in the child process to avoid duplicate files
    # - In non-debug: always configure here
    debug_mode = bool(Config.DEBUG)
    log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src', 'log')
    if not debug_mode or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(log_dir)
        logger.info("File logging initialized at %s", log_file_path)

    app = create_app()
    # Route app.logger through root handlers, keep levels consistent
    app.logger.handlers = []
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = True
    logger.info("Starting Flask application...")
    app.run(debug=Config.DEBUG, host=Config.HOST, port=Config.PORT, threaded=True)
