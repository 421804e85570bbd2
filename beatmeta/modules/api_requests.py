"""Request objects understood by an APIProvider.

A request describes one GET against the osu! web API and carries its own
outcome once a provider has performed it. Providers resolve a request with
``trigger_success`` or ``trigger_failure``; callers read ``completion_state``
and ``response`` afterwards.
"""
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from .responses import APIBeatmap, APIBeatmapSet, parse_beatmap, parse_beatmap_set

T = TypeVar("T")


class APIRequestCompletionState(Enum):
    WAITING = "waiting"
    COMPLETED = "completed"
    FAILED = "failed"


class APIRequest(Generic[T]):
    endpoint: str = ""

    def __init__(self) -> None:
        self.completion_state = APIRequestCompletionState.WAITING
        self.response: Optional[T] = None
        self.error: Optional[Exception] = None

    @property
    def params(self) -> Dict[str, Any]:
        return {}

    def parse_response(self, data: Any) -> Optional[T]:
        raise NotImplementedError

    def trigger_success(self, response: Optional[T]) -> None:
        self.response = response
        self.completion_state = APIRequestCompletionState.COMPLETED

    def trigger_failure(self, error: Exception) -> None:
        self.error = error
        self.completion_state = APIRequestCompletionState.FAILED

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.endpoint!r}, {self.completion_state.value})"


class GetBeatmapRequest(APIRequest[APIBeatmap]):
    """Look up a single beatmap by file checksum and/or filename."""

    endpoint = "beatmaps/lookup"

    def __init__(self, md5_hash: Optional[str] = None, filename: Optional[str] = None) -> None:
        super().__init__()
        self.md5_hash = md5_hash
        self.filename = filename

    @property
    def params(self) -> Dict[str, Any]:
        params = {}
        if self.md5_hash is not None:
            params["checksum"] = self.md5_hash
        if self.filename is not None:
            params["filename"] = self.filename
        return params

    def parse_response(self, data: Any) -> Optional[APIBeatmap]:
        return parse_beatmap(data)


class GetBeatmapSetRequest(APIRequest[APIBeatmapSet]):
    def __init__(self, beatmap_set_id: int) -> None:
        super().__init__()
        self.beatmap_set_id = beatmap_set_id
        self.endpoint = f"beatmapsets/{beatmap_set_id}"

    def parse_response(self, data: Any) -> Optional[APIBeatmapSet]:
        return parse_beatmap_set(data)
