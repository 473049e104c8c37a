from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from clipsync.models.content_type import ContentType


class ItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    title: Optional[str] = None
    type: Optional[ContentType] = None
    tags: List[str] = Field(default_factory=list)
    board_id: Optional[str] = Field(default=None, alias="boardId")
    is_pinned: bool = Field(default=False, alias="isPinned")
    is_favorite: bool = Field(default=False, alias="isFavorite")


class ItemUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    content: Optional[str] = None
    type: Optional[ContentType] = None
    tags: Optional[List[str]] = None
    board_id: Optional[str] = Field(default=None, alias="boardId")
    is_pinned: Optional[bool] = Field(default=None, alias="isPinned")
    is_favorite: Optional[bool] = Field(default=None, alias="isFavorite")


class FlagUpdate(BaseModel):
    value: Optional[bool] = None


class BulkDelete(BaseModel):
    ids: List[str]


class BoardCreate(BaseModel):
    name: str
    color: Optional[str] = None
    description: Optional[str] = None


class BoardUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
