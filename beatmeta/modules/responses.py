"""Response shapes returned by the osu! web API.

Only the fields the metadata lookup consumes are extracted. Everything else in
the payload is ignored, and anything missing maps to None.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .helperClasses import BeatmapOnlineStatus


@dataclass
class APITopTag:
    tag_id: int
    vote_count: int


@dataclass
class APITag:
    id: int
    name: str
    description: str = ""


@dataclass
class APIBeatmapSet:
    online_id: int
    status: BeatmapOnlineStatus = BeatmapOnlineStatus.NONE
    ranked: Optional[datetime] = None
    submitted: Optional[datetime] = None
    related_tags: Optional[List[APITag]] = None


@dataclass
class APIBeatmap:
    online_id: int
    online_beatmap_set_id: int
    author_id: int
    status: BeatmapOnlineStatus
    checksum: str
    last_updated: Optional[datetime] = None
    beatmap_set: Optional[APIBeatmapSet] = None
    top_tags: Optional[List[APITopTag]] = None


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    # fromisoformat only learned the Z suffix in 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logging.debug("Unparseable timestamp from API: %s", value)
        return None


def _parse_top_tags(raw: Any) -> Optional[List[APITopTag]]:
    if raw is None:
        return None
    top_tags = []
    for item in raw:
        # enrichment input only, a malformed vote must not fail the beatmap
        try:
            top_tags.append(APITopTag(tag_id=int(item["tag_id"]), vote_count=int(item["count"])))
        except (KeyError, TypeError, ValueError):
            logging.debug("Dropping malformed top tag entry: %s", item)
    return top_tags


def _parse_related_tags(raw: Any) -> Optional[List[APITag]]:
    if raw is None:
        return None
    return [
        APITag(
            id=int(item["id"]),
            name=item.get("name") or "",
            description=item.get("description") or "",
        )
        for item in raw
        if item.get("id") is not None
    ]


def parse_beatmap_set(data: Optional[Dict[str, Any]]) -> Optional[APIBeatmapSet]:
    """Build an APIBeatmapSet from a beatmapset payload (full or embedded)."""
    if not data:
        return None
    return APIBeatmapSet(
        online_id=int(data.get("id") or 0),
        status=BeatmapOnlineStatus.parse(data.get("status")),
        ranked=parse_timestamp(data.get("ranked_date")),
        submitted=parse_timestamp(data.get("submitted_date")),
        related_tags=_parse_related_tags(data.get("related_tags")),
    )


def parse_beatmap(data: Optional[Dict[str, Any]]) -> Optional[APIBeatmap]:
    """Build an APIBeatmap from a beatmap lookup payload."""
    if not data:
        return None
    return APIBeatmap(
        online_id=int(data.get("id") or 0),
        online_beatmap_set_id=int(data.get("beatmapset_id") or 0),
        author_id=int(data.get("user_id") or 0),
        status=BeatmapOnlineStatus.parse(data.get("status")),
        checksum=data.get("checksum") or "",
        last_updated=parse_timestamp(data.get("last_updated")),
        beatmap_set=parse_beatmap_set(data.get("beatmapset")),
        top_tags=_parse_top_tags(data.get("top_tag_ids")),
    )
