"""Loads the list of pending updates computed by the update check.

Expected file format (JSON list):

    [
      {
        "name": "PolygonDreams",
        "url": "https://example.org/PolygonDreams.zip",
        "checksums": ["<sha256 hex>"],
        "version": "1.2.0",
        "display_name": "Polygon Dreams",            (optional)
        "installed": {"version": "1.1.0", "path": "Mods/PolygonDreams.zip"}
      }
    ]
"""

import json
import logging
import os

from packaging.version import InvalidVersion, Version

from autoupdater.core.models import ModMetadata, UpdateCandidate, UpdateQueue

logger = logging.getLogger(__name__)


def _parse_version(value) -> Version | None:
    if value in (None, ''):
        return None
    return Version(str(value))


def parse_entry(entry: dict) -> tuple[UpdateCandidate, ModMetadata] | None:
    """Build a queue pair from one JSON entry, or None if the entry is unusable."""
    name = entry.get('name', '')
    url = entry.get('url', '')
    if not name or not url:
        logger.warning("Skipping pending update without name or URL: %r", entry)
        return None
    if not isinstance(name, str) or not isinstance(url, str):
        logger.warning("Skipping pending update with non-string name or URL: %r", entry)
        return None

    checksums = entry.get('checksums') or []
    if isinstance(checksums, str):
        checksums = [checksums]
    if not isinstance(checksums, list) or not all(isinstance(c, str) for c in checksums):
        logger.warning("Skipping %s: checksums must be a string or a list of strings", name)
        return None

    installed = entry.get('installed') or {}
    if not isinstance(installed, dict):
        logger.warning("Skipping %s: 'installed' must be an object", name)
        return None

    display_name = entry.get('display_name') or ''
    installed_path = installed.get('path') or None
    if not isinstance(display_name, str) or not isinstance(installed_path, (str, type(None))):
        logger.warning("Skipping %s: display name and installed path must be strings", name)
        return None

    try:
        version = _parse_version(entry.get('version'))
        installed_version = _parse_version(installed.get('version'))
    except InvalidVersion as e:
        logger.warning("Skipping %s: %s", name, e)
        return None

    candidate = UpdateCandidate(
        name=name,
        url=url,
        checksums=tuple(checksums),
        display_name=display_name,
        version=version,
    )
    metadata = ModMetadata(
        name=name,
        version=installed_version,
        path=installed_path,
    )
    return candidate, metadata


def load_pending_updates(path: str) -> UpdateQueue:
    """Read the pending update list. A missing or unreadable file means no updates."""
    if not os.path.isfile(path):
        logger.info("No pending update list at %s", path)
        return UpdateQueue()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to load pending updates: %s", e)
        return UpdateQueue()

    if not isinstance(data, list):
        logger.warning("Pending update list %s is not a JSON list", path)
        return UpdateQueue()

    pairs = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        pair = parse_entry(entry)
        if pair is not None:
            pairs.append(pair)

    queue = UpdateQueue.from_pairs(pairs)
    logger.info("Loaded %d pending update(s) from %s", len(queue), path)
    return queue


def discard_installed(path: str, installed: list[str]):
    """Drop the installed packages from the pending update list.

    Entries that failed stay in the file for the next run. Once nothing is
    left the file is removed, so a restart does not install the same
    packages again.
    """
    if not installed or not os.path.isfile(path):
        return

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to read pending updates %s: %s", path, e)
        data = []
    if not isinstance(data, list):
        data = []

    done = set(installed)
    remaining = [entry for entry in data
                 if not (isinstance(entry, dict) and isinstance(entry.get('name'), str)
                         and entry['name'] in done)]

    try:
        if remaining:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(remaining, f, indent=2)
            logger.info("%d pending update(s) left in %s", len(remaining), path)
        else:
            os.remove(path)
            logger.info("All pending updates installed, removed %s", path)
    except OSError as e:
        logger.warning("Failed to update pending list %s: %s", path, e)
