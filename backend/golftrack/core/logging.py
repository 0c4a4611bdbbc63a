import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Engine echo is noisy at INFO; keep it for explicit debugging only.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
