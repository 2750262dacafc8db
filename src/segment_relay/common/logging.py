"""
Logging helpers for segment_relay.

Classes log through LoggedClass, which stamps every record with the
instance's destination plus any structured fields passed by the caller.
JSONFormatter picks those fields up from the record.
"""

import logging
from typing import Any, Dict, Optional

# Longest error message copied into a log record
MAX_ERROR_MESSAGE_CHARS = 500

# Instance attributes copied onto every record logged by a LoggedClass
CONTEXT_ATTRIBUTES = ("destination",)


def error_fields(exc: Exception) -> Dict[str, Any]:
    """
    Structured fields describing an exception.

    RelayError subclasses contribute their error_category. The message is
    cut to MAX_ERROR_MESSAGE_CHARS so a large response body echoed into an
    error cannot flood the log.

    Example:
        >>> error_fields(DeliveryError("rejected", status_code=503))
        {'error_message': 'rejected', 'error_category': 'transient'}
    """
    message = str(exc)
    if len(message) > MAX_ERROR_MESSAGE_CHARS:
        message = message[:MAX_ERROR_MESSAGE_CHARS] + "..."

    fields: Dict[str, Any] = {"error_message": message}
    category = getattr(exc, "category", None)
    if category is not None:
        fields["error_category"] = getattr(category, "value", str(category))
    return fields


class LoggedClass:
    """
    Mixin giving a class its own logger and structured logging methods.

    The logger is named after the defining module, suffixed with
    log_component when set (e.g. segment_relay.delivery.client.delivery).
    """

    log_component: Optional[str] = None

    def __init__(self, *args, **kwargs):
        name = self.__class__.__module__
        if self.log_component:
            name = f"{name}.{self.log_component}"
        self._logger = logging.getLogger(name)
        super().__init__(*args, **kwargs)

    def _context(self, extra: Dict[str, Any]) -> Dict[str, Any]:
        context = {
            attr: getattr(self, attr)
            for attr in CONTEXT_ATTRIBUTES
            if getattr(self, attr, None) is not None
        }
        context.update(extra)
        return context

    def _log(self, level: int, msg: str, **extra: Any) -> None:
        self._logger.log(level, msg, extra=self._context(extra))

    def _log_exception(
        self,
        exc: Exception,
        msg: str,
        level: int = logging.ERROR,
        include_traceback: bool = True,
        **extra: Any,
    ) -> None:
        """Log exc with its error fields; explicit extras win over derived ones."""
        fields = error_fields(exc)
        fields.update(extra)
        self._logger.log(
            level,
            msg,
            exc_info=exc if include_traceback else None,
            extra=self._context(fields),
        )
