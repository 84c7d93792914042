import os
import logging
from prometheus_client import Counter, start_http_server
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

METRICS_PORT = int(os.getenv('METRICS_PORT', '8001'))

FRIENDSHIP_REQUESTS = Counter(
    'friendship_requests_total',
    'Friendship request mutations handled',
    ['action'],
)

def setup_logging(level: str | None = None) -> logging.Logger:
    """JSON logs on the package logger; module loggers (friendships_api.*) propagate here.

    An unknown level name falls back to INFO.
    """
    level = (level or os.getenv('LOG_LEVEL') or 'INFO').upper()
    if not isinstance(logging.getLevelName(level), int):
        level = 'INFO'

    root = logging.getLogger('friendships_api')
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
        root.addHandler(handler)
    root.setLevel(level)
    return root

def init_metrics(port: int = METRICS_PORT):
    """Initialize Prometheus metrics server"""
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except Exception as e:
        logger.warning(f'Prometheus start failed: {e}')
