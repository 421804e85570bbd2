from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class BeatmapOnlineStatus(Enum):
    NONE = "none"
    GRAVEYARD = "graveyard"
    WIP = "wip"
    PENDING = "pending"
    RANKED = "ranked"
    APPROVED = "approved"
    QUALIFIED = "qualified"
    LOVED = "loved"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BeatmapOnlineStatus":
        """Map an API status string onto the enum, unknown values become NONE."""
        if not value:
            return cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NONE


@dataclass
class BeatmapSetInfo:
    id: str
    directory: str = ""
    online_id: Optional[int] = None

    def __str__(self) -> str:
        return self.directory or self.id


@dataclass
class BeatmapInfo:
    path: str
    md5_hash: Optional[str] = None
    beatmap_set: Optional[BeatmapSetInfo] = None

    def __str__(self) -> str:
        return self.path


@dataclass
class OnlineBeatmapMetadata:
    beatmap_id: int
    beatmap_set_id: int
    author_id: int
    beatmap_status: BeatmapOnlineStatus
    md5_hash: str
    last_updated: Optional[datetime] = None
    beatmap_set_status: Optional[BeatmapOnlineStatus] = None
    date_ranked: Optional[datetime] = None
    date_submitted: Optional[datetime] = None
    user_tags: List[str] = field(default_factory=list)


@dataclass
class LookupConfig:
    api_url: str = "https://osu.ppy.sh/api/v2"
    access_token: Optional[str] = None
    api_version: str = "20240529"
    user_agent: str = "Beatmeta/1.0"
    request_timeout_seconds: int = 10
    force_offline: bool = False
