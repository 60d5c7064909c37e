from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExportMode(str, Enum):
    REALTIME = "realtime"
    TIMELAPSE_25X = "timelapse_25x"


class Export(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    video_path: str
    camera: str | None = None
    date: float | None = None
    thumb_path: str | None = None
    in_progress: bool = False
    file_name: str | None = Field(default=None, alias="file")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if isinstance(v, int) else v

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ")

    @property
    def storage_file(self) -> str:
        """Filename the backend expects for delete and rename."""
        return self.file_name or self.id

    def video_url(self, media_url: str, root_prefix: str) -> str:
        """Rewrite the storage path into a URL the backend serves."""
        return f"{media_url}{self.video_path.replace(root_prefix, '', 1)}"


class DeleteClip(BaseModel):
    """A delete request waiting for the user to confirm it."""

    model_config = ConfigDict(frozen=True)

    file: str
    export_name: str

    @classmethod
    def for_export(cls, export: Export) -> "DeleteClip":
        return cls(file=export.storage_file, export_name=export.display_name)


class CreateExportRequest(BaseModel):
    camera: str
    name: str = ""
    start: int
    end: int
    mode: ExportMode = ExportMode.REALTIME

    def payload(self) -> dict[str, str]:
        return {"playback": self.mode.value, "name": self.name}


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = False
    message: str | None = None
