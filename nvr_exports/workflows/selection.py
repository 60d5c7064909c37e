import logging

from nvr_exports.core.config import Settings
from nvr_exports.schemas.export import Export
from nvr_exports.services.external_state import SearchParams
from nvr_exports.services.registry import ExportRegistry

logger = logging.getLogger(__name__)

# Below this width/height ratio the player is boxed to 16:9
WIDE_ASPECT_THRESHOLD = 1.5


class SelectionState:
    """Which export the viewer is playing, kept in sync with the ``id`` param."""

    PARAM = "id"

    def __init__(self, registry: ExportRegistry, params: SearchParams, settings: Settings):
        self._registry = registry
        self._params = params
        self._settings = settings
        self.selected: Export | None = None
        self.aspect_ratio = 0.0

        self._unsubscribers = [
            params.subscribe(self._on_param_change),
            registry.subscribe(lambda _exports: self.sync()),
        ]

    @property
    def is_open(self) -> bool:
        return self.selected is not None

    @property
    def title(self) -> str | None:
        return self.selected.display_name if self.selected else None

    @property
    def video_url(self) -> str | None:
        if self.selected is None:
            return None
        return self.selected.video_url(self._settings.media_url, self._settings.media_root_prefix)

    @property
    def fixed_aspect(self) -> bool:
        return self.aspect_ratio < WIDE_ASPECT_THRESHOLD

    def sync(self) -> bool:
        """Resolve the external ``id`` against the registry.

        Returns True when the id was consumed. An id that arrives before the
        first fetch is left in place and resolved after the registry loads.
        """
        export_id = self._params.get(self.PARAM)
        if not export_id:
            return False

        if not self._registry.loaded:
            logger.debug("Registry not loaded yet, deferring selection of %s", export_id)
            return False

        self.selected = self._registry.find(export_id)
        if self.selected is None:
            logger.debug("No export with id %s, clearing link", export_id)
            self._params.delete(self.PARAM)
        return True

    def open(self, export: Export):
        self.selected = export
        self._params.set(self.PARAM, export.id)

    def close(self):
        self.selected = None
        self._params.delete(self.PARAM)

    def detach(self):
        """Stop following the search params and the registry."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def media_loaded(self, width: int, height: int):
        """Record the natural size of the media once the player knows it."""
        if height <= 0:
            return
        self.aspect_ratio = width / height

    def _on_param_change(self, key: str, value: str | None):
        if key != self.PARAM or value is None:
            return
        if self.selected is not None and self.selected.id == value:
            return
        self.sync()
