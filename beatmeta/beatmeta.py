#!/usr/bin/env python3
import argparse
import hashlib
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from modules.api import APIClient
from modules.config_handler import ConfigurationManager
from modules.helperClasses import BeatmapInfo, BeatmapSetInfo, OnlineBeatmapMetadata
from modules.metadata_source import APIBeatmapMetadataSource
from settings import BeatmetaSettings, build_lookup_config


def configure_logging(settings: BeatmetaSettings) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def compute_md5(path: Path) -> str:
    digest = hashlib.md5()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(65536), b''):
            digest.update(chunk)
    return digest.hexdigest()


def build_beatmap_info(path: Path) -> BeatmapInfo:
    """Describe a local .osu file; its directory stands in for the beatmap set."""
    directory = path.resolve().parent
    return BeatmapInfo(
        path=path.name,
        md5_hash=compute_md5(path),
        beatmap_set=BeatmapSetInfo(id=str(directory), directory=directory.name),
    )


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def describe_result(found: bool, metadata: Optional[OnlineBeatmapMetadata]) -> str:
    if not found:
        return "inconclusive"
    return "hit" if metadata is not None else "miss"


def format_result(path: Path, found: bool, metadata: Optional[OnlineBeatmapMetadata]) -> str:
    return json.dumps(
        {
            "file": str(path),
            "result": describe_result(found, metadata),
            "metadata": asdict(metadata) if metadata is not None else None,
        },
        default=_json_default,
    )


def load_settings(config_path: Optional[str]) -> BeatmetaSettings:
    if config_path:
        return ConfigurationManager(config_path).load_config()
    return BeatmetaSettings()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Look up online metadata for local beatmap files'
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration file (YAML or JSON)')
    parser.add_argument('files', nargs='+', help='.osu files to look up')
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        return 1

    configure_logging(settings)

    client = APIClient(build_lookup_config(settings))
    inconclusive = False
    try:
        with APIBeatmapMetadataSource(client) as source:
            if not source.available:
                logging.warning("osu! API is offline, lookups will be inconclusive")

            for file_name in args.files:
                path = Path(file_name)
                try:
                    beatmap_info = build_beatmap_info(path)
                except OSError as e:
                    logging.error(f"Cannot read {path}: {e}")
                    inconclusive = True
                    continue

                found, metadata = source.try_lookup(beatmap_info)
                inconclusive = inconclusive or not found
                print(format_result(path, found, metadata))
    finally:
        client.close()

    return 2 if inconclusive else 0


if __name__ == "__main__":
    sys.exit(main())
