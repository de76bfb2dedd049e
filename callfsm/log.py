"""Logging configuration helpers."""

import logging


def configure_logging(level: str = "INFO") -> None:
    """Send everything to one console handler at `level`."""

    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    logging.basicConfig(level=log_level, handlers=[handler], force=True)
