from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from ulid import ULID

DEFAULT_BOARD_NAME = "General"
DEFAULT_BOARD_COLOR = "#6366f1"

BOARD_COLORS = (
    "#6366f1", "#ef4444", "#10b981", "#f59e0b",
    "#8b5cf6", "#06b6d4", "#ec4899", "#84cc16",
)


def new_board_id() -> str:
    return f"b_{ULID()}"


class Board(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=new_board_id)
    name: str
    description: Optional[str] = None
    color: str = Field(default=DEFAULT_BOARD_COLOR, pattern=r"^#[0-9a-fA-F]{6}$")
    is_default: bool = Field(default=False, alias="isDefault")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("board name must not be empty")
        return value

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "Board":
        return cls.model_validate(data)
