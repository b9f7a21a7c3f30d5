"""
Logging for beancontext.

Usage:
    >>> from beancontext.observability.logging import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("property resource loaded", location="app.properties", keys=3)

Configuration:
    - BCTX_OBSERVABILITY__LOG_LEVEL=INFO (logging level)
    - BCTX_OBSERVABILITY__LOG_FORMAT=console (console or json)
"""

from .logging import JsonFormatter, StructuredFormatter, get_logger, setup_logging

__all__ = ["get_logger", "setup_logging", "StructuredFormatter", "JsonFormatter"]
