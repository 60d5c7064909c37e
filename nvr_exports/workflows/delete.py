import logging

from nvr_exports.schemas.export import DeleteClip, Export
from nvr_exports.services.api_client import ExportAPIClient, ExportAPIError
from nvr_exports.services.notifications import NotificationSink, Severity
from nvr_exports.services.registry import ExportRegistry

logger = logging.getLogger(__name__)


class DeleteWorkflow:
    """Two states: idle (``pending is None``) or waiting for confirmation."""

    def __init__(
        self,
        api_client: ExportAPIClient,
        registry: ExportRegistry,
        notifier: NotificationSink,
    ):
        self._api = api_client
        self._registry = registry
        self._notifier = notifier
        self.pending: DeleteClip | None = None

    @property
    def is_pending(self) -> bool:
        return self.pending is not None

    @property
    def confirmation_message(self) -> str | None:
        if self.pending is None:
            return None
        return f"Are you sure you want to delete {self.pending.export_name}?"

    def request(self, target: Export | DeleteClip):
        if isinstance(target, Export):
            target = DeleteClip.for_export(target)
        self.pending = target

    def cancel(self):
        self.pending = None

    async def confirm(self) -> bool:
        clip = self.pending
        if clip is None:
            return False

        try:
            response = await self._api.delete_export(clip.file)
        except ExportAPIError as e:
            # Target stays pending so the user can retry or cancel
            self._notifier.notify(f"Failed to delete export: {e.user_message}", Severity.ERROR)
            return False

        if response.status_code != 200:
            logger.warning("Delete of %s returned status %d", clip.file, response.status_code)
            return False

        if self.pending == clip:
            self.pending = None
        await self._registry.invalidate()
        return True
