"""osu! web API transport.

``APIProvider`` is the interface the metadata sources depend on: a connectivity
state plus a blocking ``perform``. ``APIClient`` is the aiohttp implementation.
It performs every request exactly once; retrying is left to callers.
"""
import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

import aiohttp

from .api_requests import APIRequest
from .helperClasses import LookupConfig


# Client errors that say nothing about whether the beatmap exists
TRANSIENT_STATUSES = (401, 403, 408, 429)


class APIState(Enum):
    OFFLINE = "offline"
    FAILING = "failing"
    CONNECTING = "connecting"
    ONLINE = "online"


class APIError(Exception):
    """Transport-level failure: the request could not be completed."""
    pass


class APIRequestFailed(APIError):
    """The API answered and rejected the request."""

    def __init__(self, status: int, endpoint: str, message: str = ""):
        self.status = status
        self.endpoint = endpoint
        super().__init__(
            f"{endpoint} rejected with status {status}" + (f": {message}" if message else "")
        )


class APIProvider(ABC):
    @property
    @abstractmethod
    def state(self) -> APIState:
        raise NotImplementedError

    @abstractmethod
    def perform(self, request: APIRequest) -> None:
        """Perform a request, blocking until it completes or fails.

        Server-side rejections resolve the request as failed. Transport
        problems raise instead.
        """
        raise NotImplementedError


class APIClient(APIProvider):
    """aiohttp client for the osu! web API.

    ``perform`` drives the async implementation on a private event loop so
    synchronous callers can use it directly. Blocking calls are serialized.
    From inside a running event loop use ``perform_async`` or offload the
    blocking call with ``asyncio.to_thread``.
    """

    def __init__(self, config: LookupConfig):
        self.api_url = config.api_url.rstrip("/")
        self.access_token = config.access_token
        self.api_version = config.api_version
        self.user_agent = config.user_agent
        self.request_timeout_seconds = config.request_timeout_seconds
        self._state = (
            APIState.ONLINE
            if config.access_token and not config.force_offline
            else APIState.OFFLINE
        )
        self._session: Optional[aiohttp.ClientSession] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> APIState:
        return self._state

    @state.setter
    def state(self, value: APIState) -> None:
        if value != self._state:
            logging.info("API state changed: %s -> %s", self._state.value, value.value)
        self._state = value

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
            "x-api-version": self.api_version,
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.request_timeout_seconds)
            self._session = aiohttp.ClientSession(headers=self._get_headers(), timeout=timeout)
        return self._session

    async def perform_async(self, request: APIRequest) -> None:
        session = await self._get_session()
        url = f"{self.api_url}/{request.endpoint}"
        data: Any = None

        try:
            async with session.get(url, params=request.params) as response:
                if response.status == 401:
                    self.state = APIState.FAILING
                if response.status >= 500 or response.status in TRANSIENT_STATUSES:
                    text = await response.text()
                    raise APIError(
                        f"{request.endpoint} failed with status {response.status}: {text}"
                    )
                if not 200 <= response.status < 300:
                    text = await response.text()
                    logging.debug(
                        "API rejected %s with status %s", request.endpoint, response.status
                    )
                    request.trigger_failure(
                        APIRequestFailed(response.status, request.endpoint, text)
                    )
                    return
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise APIError(f"Malformed JSON from {request.endpoint}: {e}") from e
        except asyncio.TimeoutError as e:
            raise APIError(f"Timed out performing {request.endpoint}") from e
        except aiohttp.ClientError as e:
            raise APIError(f"Network error performing {request.endpoint}: {e}") from e

        request.trigger_success(request.parse_response(data))

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop

    def perform(self, request: APIRequest) -> None:
        with self._lock:
            self._get_loop().run_until_complete(self.perform_async(request))

    async def close_async(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def close(self) -> None:
        """Close the session and the private loop. Safe to call repeatedly."""
        with self._lock:
            if self._loop is not None and not self._loop.is_closed():
                self._loop.run_until_complete(self.close_async())
                self._loop.close()
            self._session = None
            self._loop = None
