"""Recursive enumeration of source files."""

import logging
import os
from typing import List

from .errors import FilesystemError

logger = logging.getLogger(__name__)


def list_files(root: str) -> List[str]:
    """Return every regular file below ``root``.

    Directory entries are visited in sorted order so the result is stable
    across runs. Symlinked directories are not followed.

    Raises:
        FilesystemError: If ``root`` cannot be listed
    """
    if not os.path.isdir(root):
        raise FilesystemError(root, 'list', 'Not a directory')

    files: List[str] = []

    def walk(directory: str) -> None:
        try:
            entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
        except OSError as e:
            raise FilesystemError(directory, 'list', str(e))

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                walk(entry.path)
            elif entry.is_file():
                files.append(entry.path)

    walk(root)
    logger.debug(f"Found {len(files)} file(s) under {root}")
    return files
