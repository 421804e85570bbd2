"""Online metadata lookups against the osu! web API.

A lookup resolves a local beatmap by checksum and filename, then tries to
attach the community user tags of its set with a second request. The tag
request is best-effort: whatever happens there, a successful primary lookup
is still reported as a hit.
"""
import logging
import os
from typing import Optional, Protocol, Tuple

from .api import APIProvider, APIState
from .api_requests import APIRequestCompletionState, GetBeatmapRequest, GetBeatmapSetRequest
from .base import OnlineMetadataSource
from .helperClasses import BeatmapInfo, BeatmapSetInfo, OnlineBeatmapMetadata
from .responses import APIBeatmap


class ItemLogger(Protocol):
    def log_for_item(self, beatmap_set: BeatmapSetInfo, message: str) -> None:
        ...


class LoggingItemLogger:
    """Writes item-scoped messages through the standard logging module."""

    def log_for_item(self, beatmap_set: BeatmapSetInfo, message: str) -> None:
        logging.info("[%s] %s", beatmap_set, message)


class APIBeatmapMetadataSource(OnlineMetadataSource):
    """Performs online metadata lookups using the osu! web API."""

    name = "osu-api"

    def __init__(self, api: APIProvider, item_logger: Optional[ItemLogger] = None):
        self.api = api
        self.item_logger = item_logger or LoggingItemLogger()

    @property
    def available(self) -> bool:
        return self.api.state == APIState.ONLINE

    def try_lookup(
        self, beatmap_info: BeatmapInfo
    ) -> Tuple[bool, Optional[OnlineBeatmapMetadata]]:
        if not self.available:
            return False, None

        assert beatmap_info.beatmap_set is not None, "beatmap must belong to a set"

        request = GetBeatmapRequest(
            md5_hash=beatmap_info.md5_hash,
            filename=os.path.basename(beatmap_info.path),
        )

        try:
            # Blocking on purpose: one request in flight per lookup.
            self.api.perform(request)
        except Exception as e:
            self._log(beatmap_info.beatmap_set, f"Online retrieval failed for {beatmap_info} ({e})")
            return False, None

        if request.completion_state == APIRequestCompletionState.FAILED:
            self._log(beatmap_info.beatmap_set, f"Online retrieval failed for {beatmap_info}")
            return True, None

        beatmap = request.response
        if beatmap is None:
            logging.debug("Online retrieval returned no beatmap for %s", beatmap_info)
            return False, None

        self._log(
            beatmap_info.beatmap_set,
            f"Online retrieval mapped {beatmap_info} to "
            f"{beatmap.online_beatmap_set_id} / {beatmap.online_id}.",
        )

        beatmap_set = beatmap.beatmap_set
        metadata = OnlineBeatmapMetadata(
            beatmap_id=beatmap.online_id,
            beatmap_set_id=beatmap.online_beatmap_set_id,
            author_id=beatmap.author_id,
            beatmap_status=beatmap.status,
            beatmap_set_status=beatmap_set.status if beatmap_set else None,
            date_ranked=beatmap_set.ranked if beatmap_set else None,
            date_submitted=beatmap_set.submitted if beatmap_set else None,
            md5_hash=beatmap.checksum,
            last_updated=beatmap.last_updated,
        )

        try:
            self._populate_user_tags(metadata, beatmap)
        except Exception as e:
            self._log(
                beatmap_info.beatmap_set,
                f"Failed to populate user tags for {beatmap_info} ({e})",
            )

        return True, metadata

    def _populate_user_tags(self, metadata: OnlineBeatmapMetadata, beatmap: APIBeatmap) -> None:
        if not beatmap.top_tags:
            return

        request = GetBeatmapSetRequest(beatmap.online_beatmap_set_id)
        self.api.perform(request)

        if (
            request.completion_state != APIRequestCompletionState.COMPLETED
            or request.response is None
            or request.response.related_tags is None
        ):
            return

        tags_by_id = {tag.id: tag for tag in request.response.related_tags}
        pairs = [
            (top_tag, tags_by_id[top_tag.tag_id])
            for top_tag in beatmap.top_tags
            if top_tag.tag_id in tags_by_id
        ]
        pairs.sort(key=lambda pair: (-pair[0].vote_count, pair[1].name))

        metadata.user_tags.extend(tag.name for _, tag in pairs)

    def _log(self, beatmap_set: BeatmapSetInfo, message: str) -> None:
        self.item_logger.log_for_item(beatmap_set, f"[{type(self).__name__}] {message}")

    def dispose(self) -> None:
        pass
