"""Event bus shared by the document, the editable model and renderers."""

from __future__ import annotations

from typing import Callable, Dict

Listener = Callable[[object], None]

DOCUMENT_PARSED = "document.parsed"
MODEL_CHANGED = "model.changed"
MODEL_CANCEL_EDITING = "model.cancel_editing"
MODEL_TEXT = "model.text"


class EventBus:
    """Minimal synchronous publish/subscribe channel keyed by event name."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        listeners = self._subscribers.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        # copy so a listener may unsubscribe itself while being notified
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "EventBus",
    "Listener",
    "DOCUMENT_PARSED",
    "MODEL_CHANGED",
    "MODEL_CANCEL_EDITING",
    "MODEL_TEXT",
]
