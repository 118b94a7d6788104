"""
Event channel for observing APNs rejections.

Listeners subscribe either to a specific reason string (e.g. "Unregistered")
or to the generic "error" event that fires for every rejection.

Usage:
    channel = EventChannel()
    channel.on("Unregistered", lambda err: remove_device(err.notification.device_token))
    channel.on("error", lambda err: logger.warning(str(err)))
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


def _event_name(event: Union[str, Enum]) -> str:
    return event.value if isinstance(event, Enum) else event


class EventChannel:
    """
    Synchronous publish/subscribe keyed by event name.

    A listener that raises is logged and skipped; the remaining listeners
    still run.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}
        self._once: Dict[str, List[Listener]] = {}

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for every emission of an event."""
        self._listeners.setdefault(_event_name(event), []).append(listener)

    def once(self, event: str, listener: Listener) -> None:
        """Register a listener for the next emission of an event only."""
        self._once.setdefault(_event_name(event), []).append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        for registry in (self._listeners, self._once):
            listeners = registry.get(_event_name(event))
            if listeners and listener in listeners:
                listeners.remove(listener)

    def listener_count(self, event: str) -> int:
        event = _event_name(event)
        return len(self._listeners.get(event, [])) + len(self._once.get(event, []))

    def emit(self, event: str, payload: Any) -> int:
        """
        Call every listener of an event with the payload.

        Args:
            event: Event name
            payload: Object passed to each listener

        Returns:
            Number of listeners called
        """
        event = _event_name(event)
        listeners = list(self._listeners.get(event, []))
        listeners.extend(self._once.pop(event, []))

        for listener in listeners:
            try:
                listener(payload)
            except Exception as e:
                logger.error(
                    f"Error in APNS event listener: {e}",
                    extra={"event": event},
                    exc_info=True,
                )

        return len(listeners)
