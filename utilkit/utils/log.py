"""
Logging setup for the utilkit package.

Library modules only ever call logging.getLogger(__name__); nothing is
printed unless the host application configures logging. configure_logging()
is a convenience for scripts and REPL sessions that want to see the fetch
wrapper's request/failure messages.
"""

import logging
from typing import Optional, Union

from utilkit.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Handler installed by configure_logging(); created on first use
_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    **Conceptual**: The level comes from the argument when given, otherwise
    from UTILKIT_LOG_LEVEL (via LoggingSettings). Calling this twice does not
    add a second handler.

    Args:
        level: Logging level name ("DEBUG") or number (logging.DEBUG).

    Returns:
        The configured "utilkit" logger.
    """
    global _handler

    if level is None:
        level = get_settings().logging.level

    logger = logging.getLogger("utilkit")
    logger.setLevel(level)

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in logger.handlers:
        logger.addHandler(_handler)

    return logger
