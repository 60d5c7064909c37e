"""Cached view of the exports the backend knows about."""

import logging
from collections.abc import Callable

from nvr_exports.schemas.config import CameraConfig
from nvr_exports.schemas.export import Export
from nvr_exports.services.api_client import ExportAPIClient, ExportAPIError

logger = logging.getLogger(__name__)

RegistryListener = Callable[[list[Export]], None]


class ExportRegistry:
    """Single owner of the export collection.

    Nothing else writes ``exports``. Mutations elsewhere call
    ``invalidate()`` once the backend has confirmed them, and the whole list
    is read again. A failed read keeps the previous value.
    """

    def __init__(self, api_client: ExportAPIClient):
        self._api = api_client
        self.exports: list[Export] | None = None
        self.config: CameraConfig | None = None
        self.last_error: ExportAPIError | None = None
        self._listeners: list[RegistryListener] = []
        self._generation = 0

    @property
    def loaded(self) -> bool:
        return self.exports is not None

    @property
    def camera_names(self) -> list[str]:
        return self.config.camera_names if self.config else []

    async def fetch(self) -> list[Export] | None:
        """Fetch the export list, returning the cached value on failure.

        A read that finishes after a newer one has started is discarded.
        """
        self._generation += 1
        generation = self._generation
        try:
            exports = await self._api.get_exports()
        except ExportAPIError as e:
            if generation != self._generation:
                return self.exports
            self.last_error = e
            logger.warning("Failed to fetch exports, keeping cached list: %s", e)
            return self.exports

        if generation != self._generation:
            logger.debug("Discarding superseded export list")
            return self.exports

        self.exports = exports
        self.last_error = None
        logger.debug("Fetched %d exports", len(exports))
        self._notify(exports)
        return exports

    async def fetch_config(self) -> CameraConfig | None:
        try:
            config = await self._api.get_config()
        except ExportAPIError as e:
            self.last_error = e
            logger.warning("Failed to fetch camera config: %s", e)
            return self.config

        self.config = config
        return config

    async def invalidate(self) -> list[Export] | None:
        """Discard the cached list by reading it again."""
        logger.debug("Export registry invalidated")
        return await self.fetch()

    def find(self, export_id: str) -> Export | None:
        if not self.exports:
            return None
        return next((exp for exp in self.exports if exp.id == export_id), None)

    def subscribe(self, listener: RegistryListener) -> Callable[[], None]:
        """Call ``listener`` after every successful fetch."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, exports: list[Export]):
        for listener in list(self._listeners):
            try:
                listener(exports)
            except Exception as e:
                logger.warning("Registry listener failed: %s", e, exc_info=True)
