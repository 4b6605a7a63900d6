"""Logging setup and cache-key serialization helpers."""

import json
import logging
import sys
from typing import Any, Dict, Optional, Tuple

from underbar.models import LoggingConfig

logger = logging.getLogger(__name__)


def setup_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Attach a stdout handler to the ``underbar`` logger and return it.

    Calling it again replaces the handler installed by the previous call
    instead of stacking a second one.
    """
    config = config or LoggingConfig()
    package_logger = logging.getLogger('underbar')

    for handler in list(package_logger.handlers):
        if getattr(handler, '_underbar_handler', False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(config.format))
    handler._underbar_handler = True
    package_logger.addHandler(handler)
    package_logger.setLevel(config.level)
    return package_logger


def serialize_arguments(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> str:
    """Build the memoize cache key for one argument list.

    The key is a JSON string, so it is an approximation of equality: a list
    and a tuple with the same items, or two objects with the same ``repr``,
    produce the same key.
    """
    try:
        return json.dumps([list(args), kwargs], sort_keys=True, default=repr)
    except (TypeError, ValueError):
        # mapping keys JSON cannot express, or self-referencing arguments
        return repr((args, sorted(kwargs.items())))
