"""Shared type aliases for the dispatch package."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:
    from .domain.channels import Channel
    from .domain.outcomes import DeliveryOutcome

Event = Mapping[str, Any]
EventDict = dict[str, Any]
ResultDict = dict[str, Any]

Record = Mapping[str, Any]
CommitFn = Callable[[Record], None]
RejectFn = Callable[[Record, str], None]

DeliverFn = Callable[["Channel", str, str], "DeliveryOutcome"]
LogFn = Callable[[str], None]
NowFn = Callable[[], datetime]
MonotonicFn = Callable[[], float]
BeforeRetryFn = Callable[[int], None]
