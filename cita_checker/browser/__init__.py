"""Browser automation layer."""

from .page_driver import (
    FORCED_CLICK_SCRIPT,
    BrowserSession,
    ClickMode,
    ElementHandle,
    ElementState,
    PageDriver,
)
from .queue_waiter import QUEUE_EMPTY_PREDICATE, AsyncQueueWaiter
from .selectors import FormSelectorSet

__all__ = [
    "FORCED_CLICK_SCRIPT",
    "QUEUE_EMPTY_PREDICATE",
    "AsyncQueueWaiter",
    "BrowserSession",
    "ClickMode",
    "ElementHandle",
    "ElementState",
    "FormSelectorSet",
    "PageDriver",
]
