"""Heuristic content-type detection and display-title derivation.

Rules are checked in a fixed priority order (link, image, code, text) and the
first match wins; there is no scoring.
"""

import re
from urllib.parse import urlparse

from clipsync.exceptions import EmptyContentError
from clipsync.models.content_type import ContentType

TITLE_MAX_LENGTH = 50
CODE_PLACEHOLDER_TITLE = "Code snippet"

_LINK_RE = re.compile(r"^https?://", re.IGNORECASE)
_IMAGE_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)$", re.IGNORECASE)
_LEADING_BRACKET_RE = re.compile(r"^\s*[\{\[\(]")

CODE_MARKERS = (
    "function ",
    "const ",
    "import ",
    "export ",
    "SELECT ",
    "FROM ",
    "<script",
    "<?php",
)

COMMENT_PREFIXES = ("//", "#", "/*", "--")

# "#include", "#define" and friends are code, not comments
_PREPROCESSOR_RE = re.compile(
    r"^#(include|define|undef|ifdef|ifndef|if|elif|else|endif|pragma|import)\b")


def classify(text: str) -> ContentType:
    trimmed = (text or "").strip()
    if not trimmed:
        raise EmptyContentError("cannot classify empty content")

    if _LINK_RE.match(trimmed):
        return ContentType.LINK
    if _IMAGE_RE.search(trimmed):
        return ContentType.IMAGE
    if _LEADING_BRACKET_RE.match(trimmed):
        return ContentType.CODE
    for marker in CODE_MARKERS:
        if marker in trimmed:
            return ContentType.CODE
    return ContentType.TEXT


def _link_title(trimmed: str) -> str:
    try:
        hostname = urlparse(trimmed).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return trimmed[:TITLE_MAX_LENGTH]
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname


def _is_comment(line: str) -> bool:
    return line.startswith(COMMENT_PREFIXES) and not _PREPROCESSOR_RE.match(line)


def _code_title(trimmed: str) -> str:
    for line in trimmed.split("\n"):
        stripped = line.strip()
        if not stripped or _is_comment(stripped):
            continue
        return stripped[:TITLE_MAX_LENGTH]
    return CODE_PLACEHOLDER_TITLE


def _text_title(trimmed: str) -> str:
    first_line = trimmed.split("\n")[0]
    if len(first_line) > TITLE_MAX_LENGTH:
        return first_line[:TITLE_MAX_LENGTH - 3] + "..."
    return first_line


def derive_title(text: str, content_type: ContentType) -> str:
    """Build a short display title for ``text`` already classified as ``content_type``.

    Links yield the bare hostname (``www.`` stripped, no path); code yields the
    first non-empty, non-comment line (C preprocessor lines count as code); everything else yields the first line,
    shortened with an ellipsis past 50 characters.
    """
    trimmed = (text or "").strip()
    content_type = ContentType(content_type)

    if content_type is ContentType.LINK:
        return _link_title(trimmed)
    if content_type is ContentType.CODE:
        return _code_title(trimmed)
    return _text_title(trimmed)
