import pathlib
import sys
from typing import Callable, List, Optional

import pytest

beatmeta_path = pathlib.Path(__file__).resolve().parents[1] / "beatmeta"
sys.path.insert(0, str(beatmeta_path))

from modules.api import APIProvider, APIState
from modules.api_requests import APIRequest
from modules.helperClasses import BeatmapInfo, BeatmapSetInfo


class FakeAPIProvider(APIProvider):
    """In-memory provider; ``handler`` decides how each request resolves."""

    def __init__(self, state: APIState = APIState.ONLINE):
        self._state = state
        self.handler: Optional[Callable[[APIRequest], None]] = None
        self.performed: List[APIRequest] = []

    @property
    def state(self) -> APIState:
        return self._state

    @state.setter
    def state(self, value: APIState) -> None:
        self._state = value

    def perform(self, request: APIRequest) -> None:
        self.performed.append(request)
        if self.handler is not None:
            self.handler(request)


class RecordingItemLogger:
    def __init__(self):
        self.messages = []

    def log_for_item(self, beatmap_set, message):
        self.messages.append((beatmap_set, message))


@pytest.fixture(autouse=True, scope="session")
def add_beatmeta_to_path():
    yield
    if str(beatmeta_path) in sys.path:
        sys.path.remove(str(beatmeta_path))


@pytest.fixture
def fake_api():
    return FakeAPIProvider()


@pytest.fixture
def item_logger():
    return RecordingItemLogger()


@pytest.fixture
def beatmap_info():
    return BeatmapInfo(
        path="artist - title (mapper) [hard].osu",
        md5_hash="test",
        beatmap_set=BeatmapSetInfo(id="set-1", directory="123 artist - title"),
    )
