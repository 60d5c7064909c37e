import logging

from nvr_exports.services.api_client import ExportAPIClient, ExportAPIError
from nvr_exports.services.notifications import NotificationSink, Severity
from nvr_exports.services.registry import ExportRegistry
from nvr_exports.workflows.delete import DeleteWorkflow

logger = logging.getLogger(__name__)


class RenameWorkflow:
    def __init__(
        self,
        api_client: ExportAPIClient,
        registry: ExportRegistry,
        notifier: NotificationSink,
        delete_workflow: DeleteWorkflow | None = None,
    ):
        self._api = api_client
        self._registry = registry
        self._notifier = notifier
        self._delete_workflow = delete_workflow

    async def rename(self, export_id: str, new_name: str) -> bool:
        try:
            response = await self._api.rename_export(export_id, new_name)
        except ExportAPIError as e:
            self._notifier.notify(f"Failed to rename export: {e.user_message}", Severity.ERROR)
            return False

        if response.status_code != 200:
            logger.warning("Rename of %s returned status %d", export_id, response.status_code)
            return False

        # Any pending delete is dropped, whichever export it targets
        if self._delete_workflow is not None:
            self._delete_workflow.cancel()
        await self._registry.invalidate()
        return True
