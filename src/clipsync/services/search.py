from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from clipsync.models.clipboard_item import ClipboardItem
from clipsync.models.content_type import ContentType

DATE_RANGES = ("all", "today", "week", "month", "year")
_RANGE_DAYS = {"week": 7, "month": 30, "year": 365}


@dataclass
class SearchFilters:
    query: str = ""
    type: str = "all"
    tags: List[str] = field(default_factory=list)
    date_range: str = "all"
    board: str = "all"
    is_favorite: bool = False
    is_pinned: bool = False

    def __post_init__(self):
        if self.type != "all":
            self.type = ContentType(self.type).value
        if self.date_range not in DATE_RANGES:
            raise ValueError(f"Unknown date range: {self.date_range!r}")


@dataclass(frozen=True)
class TagCount:
    name: str
    count: int


@dataclass(frozen=True)
class Suggestion:
    id: str
    kind: str  # recent | tag | item
    text: str
    subtitle: str = ""
    count: Optional[int] = None


def _cutoff(date_range: str, now: datetime) -> Optional[datetime]:
    if date_range == "today":
        local_now = now.astimezone()
        return local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_range in _RANGE_DAYS:
        return now - timedelta(days=_RANGE_DAYS[date_range])
    return None


def matches_query(item: ClipboardItem, query: str) -> bool:
    needle = query.lower()
    return (
        needle in item.title.lower()
        or needle in item.content.lower()
        or any(needle in tag.lower() for tag in item.tags)
    )


def filter_items(
    items: Iterable[ClipboardItem],
    filters: SearchFilters,
    now: Optional[datetime] = None,
) -> List[ClipboardItem]:
    now = now or datetime.now(timezone.utc)
    filtered = list(items)

    if filters.query:
        filtered = [item for item in filtered if matches_query(item, filters.query)]

    if filters.type != "all":
        filtered = [item for item in filtered if item.type.value == filters.type]

    if filters.tags:
        wanted = set(filters.tags)
        filtered = [item for item in filtered if wanted.intersection(item.tags)]

    cutoff = _cutoff(filters.date_range, now)
    if cutoff is not None:
        filtered = [item for item in filtered if item.created_at >= cutoff]

    if filters.board == "favorites":
        filtered = [item for item in filtered if item.is_favorite]
    elif filters.board == "recent":
        day_ago = now - timedelta(days=1)
        filtered = [item for item in filtered if item.created_at > day_ago]
    elif filters.board != "all":
        filtered = [item for item in filtered if item.board_id == filters.board]

    if filters.is_favorite:
        filtered = [item for item in filtered if item.is_favorite]
    if filters.is_pinned:
        filtered = [item for item in filtered if item.is_pinned]

    return filtered


def display_order(items: Iterable[ClipboardItem]) -> List[ClipboardItem]:
    """Pinned items first, then newest first."""
    return sorted(
        items,
        key=lambda item: (not item.is_pinned, -item.created_at.timestamp()),
    )


def tag_counts(items: Iterable[ClipboardItem]) -> List[TagCount]:
    counts: Dict[str, int] = {}
    for item in items:
        for tag in item.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return [
        TagCount(name=name, count=count)
        for name, count in sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
    ]


def suggest(
    query: str,
    *,
    recent_searches: Sequence[str] = (),
    popular_tags: Sequence[TagCount] = (),
    recent_items: Sequence[ClipboardItem] = (),
    max_suggestions: int = 8,
) -> List[Suggestion]:
    needle = query.strip().lower()
    if not needle:
        return []

    suggestions: List[Suggestion] = []

    for search in [s for s in recent_searches if needle in s.lower()][:2]:
        suggestions.append(Suggestion(
            id=f"recent-{search}", kind="recent", text=search, subtitle="Recent search"))

    for tag in [t for t in popular_tags if needle in t.name.lower()][:3]:
        suggestions.append(Suggestion(
            id=f"tag-{tag.name}", kind="tag", text=tag.name,
            subtitle=f"{tag.count} items", count=tag.count))

    matching_items = [
        item for item in recent_items
        if needle in item.title.lower() or needle in item.type.value
    ]
    for item in matching_items[:3]:
        suggestions.append(Suggestion(
            id=f"item-{item.id}", kind="item", text=item.title,
            subtitle=f"{item.type.value} • Recent"))

    return suggestions[:max_suggestions]


def format_time_ago(created_at: datetime, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    seconds = int((now - created_at).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"
