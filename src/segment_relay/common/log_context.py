"""Log context variables, propagated across await points via contextvars."""

from contextvars import ContextVar
from typing import Dict, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_stage: ContextVar[Optional[str]] = ContextVar("stage", default=None)


def set_log_context(
    request_id: Optional[str] = None,
    stage: Optional[str] = None,
) -> None:
    """Set context fields; None leaves the current value untouched."""
    if request_id is not None:
        _request_id.set(request_id)
    if stage is not None:
        _stage.set(stage)


def get_log_context() -> Dict[str, Optional[str]]:
    return {
        "request_id": _request_id.get(),
        "stage": _stage.get(),
    }


def clear_log_context() -> None:
    _request_id.set(None)
    _stage.set(None)
