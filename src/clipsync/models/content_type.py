from enum import Enum


class ContentType(str, Enum):
    TEXT = "text"
    LINK = "link"
    IMAGE = "image"
    CODE = "code"
