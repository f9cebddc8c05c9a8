"""Push a tree of local source files to MediaWiki pages.

Files under a source directory are mapped to page titles, transformed by a
configurable middleware pipeline, diffed against a fingerprint cache and
written to the wiki at a paced rate.
"""

__version__ = "0.1.0"
