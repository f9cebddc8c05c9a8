"""Data models for the sync scheduler.

All models use dataclasses, following the patterns of the other packages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from wikipages.pipeline.models import PipelineStep

DEFAULT_COMMENT = "Commit via WikiPages"
DEFAULT_PACING_INTERVAL = 10.0


class SchedulerState(str, Enum):
    """Lifecycle of a SyncScheduler.

    IDLE -> AUTHENTICATING -> READY -> RUNNING -> READY, or
    AUTHENTICATING -> FAILED when login is rejected.
    """
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    READY = "ready"
    RUNNING = "running"
    FAILED = "failed"


class CacheRetention(str, Enum):
    """What happens to cached fingerprints of pages not written in a run.

    MERGE keeps them; REPLACE keeps only the pages written in the run.
    """
    MERGE = "merge"
    REPLACE = "replace"


@dataclass
class RunConfiguration:
    """Everything a sync run needs.

    Attributes:
        source_directory: Directory holding the namespace folders
        cache_file: Path of the JSON fingerprint cache
        credentials: Non-secret credential defaults (api_url, username, user_agent)
        namespace_mappings: Folder name -> namespace name ("Main" maps to "")
        steps: Pipeline steps in declaration order
        step_settings: Settings table looked up by ``PipelineStep.settings_index``
        pacing_interval: Seconds between the starts of consecutive writes
        default_comment: Edit summary used when the run gives none
        max_retries: Retries for rate limits and edit conflicts
        max_concurrent_writes: Worker limit for the write phase (None = one per page)
        cache_retention: Merge or replace the cache after a run
        legacy_extension_matching: Test every step predicate against the long extension
    """
    source_directory: str
    cache_file: str
    credentials: Dict[str, str] = field(default_factory=dict)
    namespace_mappings: Dict[str, str] = field(default_factory=dict)
    steps: List[PipelineStep] = field(default_factory=list)
    step_settings: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    pacing_interval: float = DEFAULT_PACING_INTERVAL
    default_comment: str = DEFAULT_COMMENT
    max_retries: int = 3
    max_concurrent_writes: Optional[int] = None
    cache_retention: CacheRetention = CacheRetention.MERGE
    legacy_extension_matching: bool = False


@dataclass
class RunResult:
    """Outcome of one run, by page title.

    Attributes:
        written: Pages edited or created (fingerprint recorded)
        unchanged: Pages skipped because their fingerprint matched the cache
        excluded: Pages a pipeline step marked as not to be written
        skipped: Source files that could not be mapped to a page
        failed: Pages whose write failed (retried next run)
    """
    written: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    excluded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
