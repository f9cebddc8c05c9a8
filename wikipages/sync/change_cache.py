"""Fingerprint cache used to skip unchanged pages.

The cache file is a flat JSON object mapping page titles to the MD5 hex
digest of the content last written there:

    {"Widget": "5d41402abc4b2a76b9719d911017c592", "Gadget:Foo/doc": "..."}

A missing or unreadable cache file is treated as an empty cache. Writes go
to a temporary file in the same directory which then replaces the cache, so
an interrupted write never leaves a truncated file behind. An existing
cache keeps its permission bits; a new one is created readable by the
owner only.
"""

import hashlib
import json
import logging
import os
import stat
import tempfile
from typing import Dict, Mapping

from wikipages.file_mapper.errors import FilesystemError

logger = logging.getLogger(__name__)


def fingerprint(content: str) -> str:
    """Return the MD5 hex digest of ``content``."""
    return hashlib.md5(content.encode('utf-8')).hexdigest()


def should_write(target_id: str, content: str, cache: Mapping[str, str]) -> bool:
    """Check whether ``content`` differs from what was last written to ``target_id``.

    Trailing whitespace is ignored so line-ending noise does not trigger writes.
    """
    cached = cache.get(target_id)
    return not (cached and cached == fingerprint(content.rstrip()))


class ChangeCache:
    """Loads and persists the fingerprint cache file.

    Example:
        >>> cache = ChangeCache(".wikipages/cache.json")
        >>> entries = cache.load()
        >>> if cache.should_write("Widget", content):
        ...     ...
        >>> cache.persist({"Widget": fingerprint(content.rstrip())})
    """

    def __init__(self, path: str):
        self.path = path
        self.entries: Dict[str, str] = {}

    def load(self) -> Dict[str, str]:
        """Read the cache file, returning an empty mapping on any failure."""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.info(f"No cache file at {self.path}, starting empty")
            raw = {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache file {self.path}: {e}")
            raw = {}

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring cache file {self.path}: not a JSON object")
            raw = {}

        self.entries = {
            key: value for key, value in raw.items()
            if isinstance(key, str) and isinstance(value, str)
        }
        logger.debug(f"Loaded {len(self.entries)} fingerprint(s) from {self.path}")
        return dict(self.entries)

    def should_write(self, target_id: str, content: str) -> bool:
        return should_write(target_id, content, self.entries)

    def persist(self, mapping: Mapping[str, str]) -> None:
        """Atomically replace the cache file with ``mapping``.

        Raises:
            FilesystemError: If the file cannot be written
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise FilesystemError(directory, 'create_directory', str(e))

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                encoding='utf-8',
                dir=directory,
                prefix='.cache-',
                suffix='.tmp',
                delete=False,
            ) as f:
                temp_path = f.name
                json.dump(dict(mapping), f)
                f.flush()
                os.fsync(f.fileno())
            if os.path.exists(self.path):
                os.chmod(temp_path, stat.S_IMODE(os.stat(self.path).st_mode))
            os.replace(temp_path, self.path)
        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)
            raise FilesystemError(self.path, 'write', str(e))

        self.entries = dict(mapping)
        logger.info(f"Saved {len(self.entries)} fingerprint(s) to {self.path}")
