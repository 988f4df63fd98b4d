"""Logging with contextual dimensions.

Every component logs through a ``ContextualLogger`` so that records carry the
project, component and resource being worked on. Dimensions are attached to the
record's ``extra`` and rendered as ``key=value`` pairs unless running in local
development mode.
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

from firestore_indexes.core.config import settings


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that carries a prefix and a set of context dimensions."""

    def __init__(
        self,
        logger: logging.Logger,
        prefix: str = "",
        dimensions: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the contextual logger.

        Args:
            logger: Underlying standard library logger
            prefix: Text prepended to every message
            dimensions: Context attached to every record
        """
        super().__init__(logger, {})
        self.prefix = prefix
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """Merge dimensions into the record's extra and apply the prefix."""
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = {"dimensions": extra}
        if self.prefix:
            msg = f"{self.prefix}{msg}"
        return msg, kwargs

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a copy of this logger with a different prefix."""
        return ContextualLogger(self.logger, prefix=prefix, dimensions=self.dimensions)

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a copy of this logger with additional dimensions."""
        merged = dict(self.dimensions)
        merged.update(dimensions)
        return ContextualLogger(self.logger, prefix=self.prefix, dimensions=merged)


class _DimensionFormatter(logging.Formatter):
    """Formatter that appends context dimensions to the message."""

    def __init__(self, include_dimensions: bool):
        super().__init__(fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s")
        self.include_dimensions = include_dimensions

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        dimensions = getattr(record, "dimensions", None)
        if self.include_dimensions and dimensions:
            rendered = " ".join(f"{key}={value}" for key, value in sorted(dimensions.items()))
            line = f"{line} | {rendered}"
        return line


class LoggerConfigurator:
    """Builds contextual loggers with a shared handler configuration."""

    _configured = False

    @classmethod
    def _configure_root(cls) -> None:
        if cls._configured:
            return
        root = logging.getLogger("firestore_indexes")
        root.setLevel(settings.LOG_LEVEL)
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_DimensionFormatter(include_dimensions=not settings.LOCAL_DEVELOPMENT))
        root.addHandler(handler)
        cls._configured = True

    @classmethod
    def configure_logger(
        cls,
        name: str,
        prefix: str = "",
        dimensions: Optional[Dict[str, Any]] = None,
    ) -> ContextualLogger:
        """Create a contextual logger under the package logger hierarchy.

        Args:
            name: Logger name, usually ``__name__``
            prefix: Text prepended to every message
            dimensions: Initial context dimensions

        Returns:
            ContextualLogger bound to the named logger
        """
        cls._configure_root()
        return ContextualLogger(logging.getLogger(name), prefix=prefix, dimensions=dimensions)


logger = LoggerConfigurator.configure_logger("firestore_indexes")
