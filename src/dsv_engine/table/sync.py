"""Change notification between the editing core, the parser and renderers."""

from __future__ import annotations

from typing import Protocol

from dsv_engine.runtime import telemetry

from .changes import Change, ModelReset, describe_change
from .document import DSVDocument, ParseCompleted
from .events import DOCUMENT_PARSED, MODEL_CHANGED, MODEL_TEXT, EventBus


class ChangeListener(Protocol):
    """What a renderer subscribes to ``model.changed`` with."""

    def __call__(self, change: Change) -> None:
        """Redraw the region ``change`` describes."""
        ...


class ChangeNotifier:
    """Publishes edits and keeps the parser's own signal from doubling them.

    Each publish tags the re-parse request with a fresh generation token.
    Completions carrying a token this notifier issued are dropped; completions
    without a token come from parses the core did not ask for and reach the
    renderer as ``ModelReset``.
    """

    def __init__(self, document: DSVDocument, bus: EventBus) -> None:
        self.document = document
        self.bus = bus
        self.logger = telemetry.get_logger("dsv_engine.sync")
        self._last_token = 0
        document.bus.subscribe(DOCUMENT_PARSED, self._on_parsed)

    @property
    def last_token(self) -> int:
        return self._last_token

    def publish(self, change: Change, body_text: str) -> None:
        self._last_token += 1
        self.document.parse_async(token=self._last_token)
        self.bus.emit(MODEL_CHANGED, change)
        self.bus.emit(MODEL_TEXT, body_text)
        telemetry.record_event(
            "table.changed",
            level="debug",
            data={"token": self._last_token, **describe_change(change)},
        )

    def _on_parsed(self, payload: object) -> None:
        if not isinstance(payload, ParseCompleted):
            return
        if payload.token is not None and payload.token <= self._last_token:
            self.logger.debug(f"parse {payload.token} suppressed")
            return
        self.logger.debug(f"parse version {payload.version} forwarded")
        self.bus.emit(MODEL_CHANGED, ModelReset())


__all__ = ["ChangeListener", "ChangeNotifier"]
