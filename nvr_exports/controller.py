"""The exports page: wires the registry, the workflows and the notification surface."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from nvr_exports.core.config import Settings, get_settings
from nvr_exports.schemas.export import DeleteClip, Export
from nvr_exports.services.api_client import ExportAPIClient
from nvr_exports.services.external_state import SearchParams
from nvr_exports.services.notifications import LoggingNotificationSink, NotificationSink
from nvr_exports.services.registry import ExportRegistry
from nvr_exports.services.search import filter_exports, visible_ids
from nvr_exports.workflows.create import CreateExportWorkflow
from nvr_exports.workflows.delete import DeleteWorkflow
from nvr_exports.workflows.rename import RenameWorkflow
from nvr_exports.workflows.selection import SelectionState

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No exports found"


@dataclass(frozen=True)
class ExportListItem:
    export: Export
    hidden: bool


@dataclass(frozen=True)
class PageView:
    title: str
    search: str
    show_toolbar: bool
    items: list[ExportListItem]
    empty_message: str | None


class ExportsController:
    """State for one mounted exports page.

    Entry points that talk to the backend return the scheduled task rather
    than waiting on it. Requests are neither deduplicated nor cancelled.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        api_client: ExportAPIClient | None = None,
        notifier: NotificationSink | None = None,
        params: SearchParams | None = None,
    ):
        self.settings = settings or get_settings()
        self.api = api_client or ExportAPIClient(self.settings)
        self.notifier = notifier or LoggingNotificationSink()
        self.params = params if params is not None else SearchParams()

        self.registry = ExportRegistry(self.api)
        self.selection = SelectionState(self.registry, self.params, self.settings)
        self.create = CreateExportWorkflow(self.api, self.registry, self.notifier, self.settings)
        self.delete = DeleteWorkflow(self.api, self.registry, self.notifier)
        self.rename_flow = RenameWorkflow(self.api, self.registry, self.notifier, self.delete)

        self.search = ""
        self._tasks: set[asyncio.Task] = set()

    async def mount(self):
        """Load the camera config and the export list, then resolve any deep link."""
        logger.info("Mounting %s", self.settings.page_title)
        await self.registry.fetch_config()
        await self.registry.fetch()
        self.selection.sync()

    async def unmount(self):
        await self.wait_idle()
        self.selection.detach()
        await self.api.close()

    @property
    def exports(self) -> list[Export] | None:
        return self.registry.exports

    @property
    def filtered_exports(self) -> list[Export] | None:
        return filter_exports(self.registry.exports, self.search)

    def set_search(self, value: str):
        self.search = value

    def view(self) -> PageView:
        """Every export is listed; those outside the search are marked hidden."""
        exports = self.registry.exports
        visible = visible_ids(exports, self.search)
        items: list[ExportListItem] = []
        empty_message = EMPTY_MESSAGE

        if exports and visible:
            items = [
                ExportListItem(export=exp, hidden=bool(self.search) and exp.id not in visible)
                for exp in exports
            ]
            empty_message = None

        return PageView(
            title=self.settings.page_title,
            search=self.search,
            show_toolbar=exports is not None,
            items=items,
            empty_message=empty_message,
        )

    # Viewer

    def open_export(self, export: Export):
        self.selection.open(export)

    def close_viewer(self):
        self.selection.close()

    # Create

    def open_create_dialog(self, now: datetime | None = None):
        self.create.open_dialog(now=now)

    def submit_create(self) -> asyncio.Task:
        return self._spawn(self.create.submit())

    # Rename

    def rename(self, export_id: str, new_name: str) -> asyncio.Task:
        return self._spawn(self.rename_flow.rename(export_id, new_name))

    # Delete

    def request_delete(self, target: Export | DeleteClip):
        self.delete.request(target)

    def cancel_delete(self):
        self.delete.cancel()

    def confirm_delete(self) -> asyncio.Task:
        return self._spawn(self.delete.confirm())

    # Background tasks

    def _spawn(self, coro: Coroutine[Any, Any, bool]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background request failed", exc_info=task.exception())

    async def wait_idle(self):
        """Wait for every request started from this page to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
