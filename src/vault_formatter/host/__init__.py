"""Host-side collaborators: event bus and user notices."""

from vault_formatter.host.events import (
    ACTIVE_DOCUMENT_CHANGED,
    SHUTDOWN_REQUESTED,
    EventBus,
    EventManager,
    EventRef,
)
from vault_formatter.host.notices import LogNotifier, Notifier, StreamNotifier

__all__ = [
    "ACTIVE_DOCUMENT_CHANGED",
    "EventBus",
    "EventManager",
    "EventRef",
    "LogNotifier",
    "Notifier",
    "SHUTDOWN_REQUESTED",
    "StreamNotifier",
]
