import logging
from typing import Optional

from eduresults.config.settings import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_level(level: Optional[str] = None) -> int:
    name = (level or settings.log_level).strip().upper()
    value = getattr(logging, name, None)
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a stream handler for the engine's loggers at the configured level."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("eduresults").setLevel(resolve_level(level))
