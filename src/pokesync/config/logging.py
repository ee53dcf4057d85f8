"""Logging setup for the pokesync command line."""

from __future__ import annotations

import logging

# chatty at INFO: one line per request or per pooled connection
_NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Log to stderr at INFO; ``verbose`` switches to DEBUG and unmutes the HTTP stack."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)
