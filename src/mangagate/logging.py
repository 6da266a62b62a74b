import sys

from loguru import logger

__all__ = ["configure_logging"]


def configure_logging(level: str = "INFO") -> None:
    """
    Send loguru output to stderr at ``level``, replacing any earlier sink.

    Called by the CLI callback (``--verbose`` selects DEBUG) and by ``create_app``
    with ``Settings.log_level`` (``MANGAGATE_LOG_LEVEL``).

    Args:
        level: Level name in any case, e.g. ``info`` or ``DEBUG``.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
    )
