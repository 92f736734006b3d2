from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional, Union

# Request-scoped values stamped onto every log record.
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
procedure_var: ContextVar[Optional[str]] = ContextVar("procedure", default=None)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | proc=%(procedure)s | %(message)s"


class LoggingContextFilter(logging.Filter):
    """
    Copy the correlation id and the running procedure name from context vars
    onto the record ("-" when unset) so LOG_FORMAT can reference them.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.correlation_id = correlation_id_var.get() or "-"
        record.procedure = procedure_var.get() or "-"
        return True


class _TaskboardHandler(logging.StreamHandler):
    """Stdout handler installed by configure_logging; replaced on reconfiguration."""


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Send root logging to stdout with LOG_FORMAT and the context filter.

    Calling it again swaps the previous taskboard handler instead of adding a
    second one; handlers installed by others are left alone.
    """
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _TaskboardHandler)]:
        root.removeHandler(existing)

    handler = _TaskboardHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(LoggingContextFilter())
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
