from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_ITEMS = 1000
DEFAULT_SYNC_INTERVAL_MS = 30000
DEFAULT_POLL_INTERVAL_MS = 2000


class Settings(BaseModel):
    """Installation-wide settings stored under the ``settings`` key."""

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", validate_assignment=True)

    auto_sync: bool = Field(default=True, alias="autoSync")
    max_items: int = Field(default=DEFAULT_MAX_ITEMS, ge=1, alias="maxItems")
    sync_interval: int = Field(
        default=DEFAULT_SYNC_INTERVAL_MS, ge=1, alias="syncInterval")
    auto_save_clipboard: bool = Field(default=False, alias="autoSaveClipboard")
    clipboard_poll_interval: int = Field(
        default=DEFAULT_POLL_INTERVAL_MS, ge=1, alias="clipboardPollInterval")

    @property
    def sync_interval_seconds(self) -> float:
        return self.sync_interval / 1000.0

    @property
    def poll_interval_seconds(self) -> float:
        return self.clipboard_poll_interval / 1000.0

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
