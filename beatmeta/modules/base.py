from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from .helperClasses import BeatmapInfo, OnlineBeatmapMetadata


class OnlineMetadataSource(ABC):
    """Base class for online beatmap metadata sources.

    ``try_lookup`` returns a ``(found, metadata)`` pair:

    - ``(False, None)``: inconclusive, the caller may retry or ask another source
    - ``(True, None)``: this source knows the beatmap has no online metadata
    - ``(True, metadata)``: hit
    """
    name: str

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether the source can currently serve lookups."""
        raise NotImplementedError

    @abstractmethod
    def try_lookup(
        self, beatmap_info: BeatmapInfo
    ) -> Tuple[bool, Optional[OnlineBeatmapMetadata]]:
        raise NotImplementedError

    def dispose(self) -> None:
        """Release held resources. Must never raise."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


class MetadataSourceChain:
    """Ordered set of sources queried until one answers definitively."""

    def __init__(self, sources: Optional[Iterable[OnlineMetadataSource]] = None):
        self._sources: List[OnlineMetadataSource] = list(sources or [])

    def register(self, source: OnlineMetadataSource) -> OnlineMetadataSource:
        self._sources.append(source)
        return source

    def sources(self) -> Iterable[OnlineMetadataSource]:
        return list(self._sources)

    def get_source(self, name: str) -> Optional[OnlineMetadataSource]:
        """Get a source by name."""
        return next((s for s in self._sources if s.name == name.lower()), None)

    def lookup(self, beatmap_info: BeatmapInfo) -> Optional[OnlineBeatmapMetadata]:
        for source in self._sources:
            if not source.available:
                logging.debug("Skipping unavailable metadata source %s", source.name)
                continue

            found, metadata = source.try_lookup(beatmap_info)
            if found:
                return metadata

        return None

    def dispose(self) -> None:
        for source in self._sources:
            source.dispose()
