"""Shareable state that lives outside the controller, such as URL query params."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

StateListener = Callable[[str, str | None], None]


class SearchParams:
    """Observable string key/value store.

    Listeners receive ``(key, value)`` on every change; ``value`` is ``None``
    when the key was removed. Setting a key to its current value is not a
    change.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})
        self._listeners: list[StateListener] = []

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str):
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self._emit(key, value)

    def delete(self, key: str):
        if key not in self._values:
            return
        del self._values[key]
        self._emit(key, None)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, key: str, value: str | None):
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception as e:
                logger.warning("Search param listener failed for %s: %s", key, e, exc_info=True)
