from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from ulid import ULID

from clipsync.models.content_type import ContentType


def new_item_id() -> str:
    # ULID-backed UUID keeps ids unique and roughly time ordered
    return str(ULID().to_uuid())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    seen = set()
    result: List[str] = []
    for tag in tags or []:
        name = str(tag).strip()
        if not name or name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


class ClipboardItem(BaseModel):
    """One saved clip.

    Field names follow the storage layout (camelCase aliases); Python code uses
    the snake_case attributes.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=new_item_id)
    title: str = ""
    content: str
    type: ContentType = ContentType.TEXT
    tags: List[str] = Field(default_factory=list)
    is_pinned: bool = Field(default=False, alias="isPinned")
    is_favorite: bool = Field(default=False, alias="isFavorite")
    board_id: Optional[str] = Field(default=None, alias="boardId")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return normalize_tags(list(value))

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> "ClipboardItem":
        return cls.model_validate(data)
