"""Mapping of source file paths to wiki page titles.

Source trees are laid out as ``<root>/<Namespace>/<folders...>/<file>``. The
first folder names the wiki namespace, the remaining folders become subpage
segments and the file stem becomes the last segment.

Rules, in order:
    1. The namespace folder is looked up in the namespace mapping. "Main" and
       any folder mapped to "" produce no prefix; anything else becomes
       "<mapped>:".
    2. The long extension runs from the first dot of the file name, the short
       extension from the last dot. The stem is the name minus the long
       extension.
    3. A file named after its own folder (``Widget/Widget.lua``) is that
       folder's page, so one folder level is dropped.
    4. ``.doc.wikitext`` files become the "/doc" subpage.
    5. ``.css`` and ``.js`` pages keep their extension in the title.

Examples:
    src/Main/Widget/Widget.lua          -> Widget
    src/Gadgets/Foo/Foo.doc.wikitext    -> Gadget:Foo/doc   ({"Gadgets": "Gadget"})
    src/Main/common.css                 -> common.css
"""

import os
import posixpath
from typing import Mapping, Optional

from .models import ResolvedPath

DEFAULT_NAMESPACE = "Main"

DOC_EXTENSION = ".doc.wikitext"
DOC_SUFFIX = "/doc"

VISIBLE_EXTENSIONS = (".css", ".js")


class PathResolver:
    """Resolves source file paths to page titles.

    Example:
        >>> resolver = PathResolver("/repo/src", {"Gadgets": "Gadget"})
        >>> resolver.resolve("/repo/src/Gadgets/Foo/Foo.doc.wikitext").target_id
        'Gadget:Foo/doc'
    """

    def __init__(self, root: str, namespace_mappings: Optional[Mapping[str, str]] = None):
        """Initialize the resolver.

        Args:
            root: Source directory the namespace folders live in
            namespace_mappings: Folder name -> namespace name
        """
        self.root = root
        self.namespace_mappings = {DEFAULT_NAMESPACE: "", **(namespace_mappings or {})}

    def resolve(self, file_path: str) -> ResolvedPath:
        """Resolve one file path. See the module docstring for the rules.

        The returned stem may be empty (e.g. a file placed directly in the
        source root, or a dot-file); callers treat that as unresolvable.
        """
        return resolve(file_path, self.root, self.namespace_mappings)


def resolve(
    file_path: str,
    root: str,
    namespace_mappings: Optional[Mapping[str, str]] = None,
) -> ResolvedPath:
    """Resolve a source file path to a page title and extension metadata.

    Args:
        file_path: Path of the source file, inside ``root``
        root: Source directory
        namespace_mappings: Folder name -> namespace name

    Returns:
        ResolvedPath with target_id, short/long extension and stem
    """
    relative = os.path.relpath(file_path, root).replace(os.sep, "/")
    segments = relative.split("/")
    namespace_token = segments[0]
    body = "/".join(segments[1:])

    mappings = {DEFAULT_NAMESPACE: "", **(namespace_mappings or {})}
    namespace = mappings.get(namespace_token, namespace_token)
    prefix = f"{namespace}:" if namespace else ""

    folder_path = _normalize_folder(posixpath.dirname(body))
    folder = posixpath.basename(folder_path)
    file_name = posixpath.basename(body)

    dot = file_name.find(".")
    long_extension = file_name[dot:] if dot != -1 else ""
    short_extension = posixpath.splitext(file_name)[1]
    stem = file_name[:len(file_name) - len(long_extension)]

    if folder_path and stem == folder:
        folder_path = _normalize_folder(posixpath.dirname(folder_path))

    target_id = f"{prefix}{folder_path + '/' if folder_path else ''}{stem}"

    if long_extension == DOC_EXTENSION:
        target_id = f"{target_id}{DOC_SUFFIX}"
    if short_extension in VISIBLE_EXTENSIONS:
        target_id = f"{target_id}{short_extension}"

    return ResolvedPath(
        target_id=target_id,
        short_extension=short_extension,
        long_extension=long_extension,
        stem=stem,
    )


def _normalize_folder(folder_path: str) -> str:
    """Treat "." (no folder) the same as an empty folder path."""
    return "" if folder_path in ("", ".") else folder_path
