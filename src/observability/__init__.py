# noqa: D104 - package initialization
from .logging import configure_structured_logging  # noqa: F401
from .metrics import metrics_blueprint, record_playlist_lookup, record_token_cache_hit, record_token_exchange  # noqa: F401
