import logging

from shopcatalog.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)

    # SQL echo is controlled by DEBUG on the engine, keep the pool quiet
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
