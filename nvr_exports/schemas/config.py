from typing import Any

from pydantic import BaseModel, ConfigDict


class CameraConfig(BaseModel):
    """The slice of the backend config this client reads."""

    model_config = ConfigDict(extra="ignore")

    cameras: dict[str, Any] = {}

    @property
    def camera_names(self) -> list[str]:
        return list(self.cameras)

    def has_camera(self, name: str) -> bool:
        return name in self.cameras
