"""File mapping for wikipages.

This package maps source files to page titles and defines the ContentUnit
value object passed through the middleware pipeline.
"""

from .errors import FileMapperError, FilesystemError, PathResolutionError
from .file_lister import list_files
from .models import ContentUnit, ResolvedPath
from .path_resolver import PathResolver, resolve

__all__ = [
    'ContentUnit',
    'ResolvedPath',
    'PathResolver',
    'resolve',
    'list_files',
    'FileMapperError',
    'FilesystemError',
    'PathResolutionError',
]
