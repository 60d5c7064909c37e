"""Create-export dialog: form state, validation and submission."""

import logging
from datetime import datetime

from nvr_exports.core.config import Settings
from nvr_exports.core.timestamps import default_export_window, round_epoch, to_epoch_seconds
from nvr_exports.schemas.export import CreateExportRequest, ExportMode
from nvr_exports.services.api_client import ExportAPIClient, ExportAPIError
from nvr_exports.services.notifications import NotificationSink, Severity
from nvr_exports.services.registry import ExportRegistry

logger = logging.getLogger(__name__)


class ExportValidationError(ValueError):
    """The form cannot be submitted as filled in."""


class CreateExportWorkflow:
    SUCCESS_MESSAGE = "Successfully started export. View the file in the /exports folder."

    def __init__(
        self,
        api_client: ExportAPIClient,
        registry: ExportRegistry,
        notifier: NotificationSink,
        settings: Settings,
    ):
        self._api = api_client
        self._registry = registry
        self._notifier = notifier
        self._settings = settings

        self.is_open = False
        self.camera = ""
        self.name = ""
        self.mode: ExportMode | str = ExportMode.REALTIME
        self.start_time = ""
        self.end_time = ""

    @property
    def camera_options(self) -> list[str]:
        return self._registry.camera_names

    def open_dialog(self, now: datetime | None = None):
        """Open the dialog with the default trailing window ending at ``now``."""
        self.start_time, self.end_time = default_export_window(
            self._settings.tzinfo,
            now=now,
            minutes=self._settings.default_export_window_minutes,
        )
        self.is_open = True

    def close_dialog(self):
        self.is_open = False

    def reset(self):
        self.name = ""
        self.start_time = ""
        self.end_time = ""
        self.mode = ExportMode.REALTIME

    def build_request(self) -> CreateExportRequest:
        """Validate the form, in order, stopping at the first problem.

        Raises:
            ExportValidationError: with the message to show the user.
        """
        if not self.camera or not self.start_time or not self.end_time:
            raise ExportValidationError("Please fill in all required fields")

        config = self._registry.config
        if config is not None and not config.has_camera(self.camera):
            raise ExportValidationError(f"Unknown camera: {self.camera}")

        try:
            mode = ExportMode(self.mode)
        except ValueError:
            raise ExportValidationError(f"Unknown export mode: {self.mode}") from None

        tz = self._settings.tzinfo
        try:
            start = to_epoch_seconds(self.start_time, tz)
            end = to_epoch_seconds(self.end_time, tz)
        except ValueError:
            raise ExportValidationError("Invalid start or end time") from None

        if end <= start:
            raise ExportValidationError("End time must be after start time")

        return CreateExportRequest(
            camera=self.camera,
            name=self.name,
            start=round_epoch(start),
            end=round_epoch(end),
            mode=mode,
        )

    async def submit(self) -> bool:
        try:
            request = self.build_request()
        except ExportValidationError as e:
            logger.debug("Export form rejected: %s", e)
            self._notifier.notify(str(e), Severity.ERROR)
            return False

        try:
            response = await self._api.start_export(request)
        except ExportAPIError as e:
            self._notifier.notify(f"Failed to start export: {e.user_message}", Severity.ERROR)
            return False

        if response.status_code != 200:
            logger.warning("Export start returned status %d, ignoring", response.status_code)
            return False

        self._notifier.notify(self.SUCCESS_MESSAGE, Severity.SUCCESS)
        self.is_open = False
        self.reset()
        await self._registry.invalidate()
        return True
