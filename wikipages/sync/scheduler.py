"""Sync scheduler: the run loop pushing source files to the wiki.

A run goes through these phases:
    1. Check the source directory and load the fingerprint cache
    2. Enumerate source files; resolve, read and pipe each one in order
    3. Keep units still marked to persist, de-duplicated by page title
       (a later file replaces an earlier one with the same title)
    4. Drop units whose fingerprint matches the cache
    5. Start write k no earlier than (k + 1) * pacing_interval after the
       write phase begins; writes run concurrently and are all joined
    6. Persist the fingerprints of the pages written

Discovery and the pipeline run on the calling thread so steps observe
files in enumeration order. Only the write phase is concurrent.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional

from wikipages.file_mapper.errors import FilesystemError, PathResolutionError
from wikipages.file_mapper.file_lister import list_files
from wikipages.file_mapper.models import ContentUnit
from wikipages.file_mapper.path_resolver import PathResolver
from wikipages.pipeline.errors import PipelineStepError
from wikipages.pipeline.middleware_pipeline import MiddlewarePipeline
from wikipages.pipeline.models import PipelineStep
from wikipages.wiki_client.api_wrapper import APIWrapper
from wikipages.wiki_client.auth import Authenticator
from wikipages.wiki_client.errors import MissingTargetError
from wikipages.wiki_client.models import Revision

from .change_cache import ChangeCache, fingerprint, should_write
from .config_loader import ConfigLoader, validate_cache_path
from .errors import (
    ConfigurationError,
    NotReadyError,
    RemoteWriteError,
    SourceMissingError,
)
from .events import (
    CreateError,
    EditError,
    EventChannel,
    LoginError,
    MiddlewareError,
    Ready,
    RunningEnded,
    RunningStarted,
)
from .models import CacheRetention, RunConfiguration, RunResult, SchedulerState

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Orchestrates runs against one wiki.

    The remote client only needs ``login()``, ``edit(title, reviser)`` and
    ``create(title, text, summary)``; an APIWrapper is built from the
    configuration when none is given.

    Example:
        >>> scheduler = SyncScheduler.init_from_file("wikipages.yaml")
        >>> scheduler.events.subscribe(EditError, lambda e: print(e.error))
        >>> result = scheduler.run("Sync from repository")
        >>> print(f"Wrote {len(result.written)} page(s)")
    """

    def __init__(
        self,
        config: RunConfiguration,
        client=None,
        events: Optional[EventChannel] = None,
        file_lister: Callable[[str], List[str]] = list_files,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the scheduler in the IDLE state.

        Args:
            config: Run configuration (owned by the scheduler from now on)
            client: Remote wiki client (default: APIWrapper from config)
            events: Notification channel (default: a new EventChannel)
            file_lister: Recursive file enumeration for the source directory
            sleep: Sleep function used to pace writes
            clock: Monotonic clock used to pace writes

        Raises:
            ConfigError: If the cache path is a directory
        """
        validate_cache_path(config.cache_file)

        self._config = config
        self._client = client if client is not None else APIWrapper(
            Authenticator(config.credentials),
            max_retries=config.max_retries,
        )
        self.events = events or EventChannel()
        self._file_lister = file_lister
        self._sleep = sleep
        self._clock = clock

        self._state = SchedulerState.IDLE
        self._state_lock = threading.Lock()

        self._resolver = PathResolver(config.source_directory, config.namespace_mappings)
        self._pipeline = MiddlewarePipeline(
            legacy_extension_matching=config.legacy_extension_matching,
            on_error=self._report_middleware_error,
        )

    @classmethod
    def init(cls, config: RunConfiguration, **kwargs) -> 'SyncScheduler':
        """Create a scheduler and log in."""
        scheduler = cls(config, **kwargs)
        scheduler.login()
        return scheduler

    @classmethod
    def from_file(cls, project_path: str, **kwargs) -> 'SyncScheduler':
        """Create a scheduler from a project file without logging in."""
        return cls(ConfigLoader.load(project_path), **kwargs)

    @classmethod
    def init_from_file(cls, project_path: str, **kwargs) -> 'SyncScheduler':
        """Create a scheduler from a project file and log in."""
        return cls.init(ConfigLoader.load(project_path), **kwargs)

    @property
    def config(self) -> RunConfiguration:
        return self._config

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is SchedulerState.READY

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    def login(self) -> None:
        """Authenticate against the wiki.

        Moves IDLE (or READY, to refresh the session) through AUTHENTICATING
        to READY, or to FAILED when the login is rejected.

        Raises:
            NotReadyError: If running, already authenticating or failed before
            AuthenticationError, InvalidCredentialsError, APIUnreachableError:
                If the login fails
        """
        with self._state_lock:
            if self._state not in (SchedulerState.IDLE, SchedulerState.READY):
                raise NotReadyError(self._state.value)
            self._state = SchedulerState.AUTHENTICATING

        try:
            self._client.login()
        except Exception as e:
            with self._state_lock:
                self._state = SchedulerState.FAILED
            logger.error(f"Login failed: {e}")
            self.events.emit(LoginError(error=e))
            raise

        with self._state_lock:
            self._state = SchedulerState.READY
        logger.info("Scheduler ready")
        self.events.emit(Ready())

    def add_steps(self, *steps: PipelineStep) -> None:
        """Append pipeline steps.

        Raises:
            ConfigurationError: If a run is in progress
        """
        with self._state_lock:
            self._ensure_not_running()
            self._config.steps = [*self._config.steps, *steps]

    def set_step_settings(self, settings: Dict[str, Dict]) -> None:
        """Merge entries into the step settings table, overriding existing keys.

        Raises:
            ConfigurationError: If a run is in progress
        """
        with self._state_lock:
            self._ensure_not_running()
            self._config.step_settings = {**self._config.step_settings, **settings}

    def _ensure_not_running(self) -> None:
        if self._state is SchedulerState.RUNNING:
            raise ConfigurationError()

    def prepare_unit(self, file_path: str, commit_message: Optional[str] = None) -> ContentUnit:
        """Resolve, read and pipe a single source file.

        Needs no login; pipeline failures are recorded on the returned unit.

        Raises:
            PathResolutionError: If the file maps to an empty page name
            FilesystemError: If the file cannot be read as UTF-8 text
        """
        resolved = self._resolver.resolve(file_path)
        if not resolved.stem:
            raise PathResolutionError(file_path, "file name has no stem")

        try:
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise FilesystemError(file_path, 'read', f"Not UTF-8 text: {e}")
        except OSError as e:
            raise FilesystemError(file_path, 'read', str(e))

        unit = ContentUnit(
            original_path=file_path,
            target_id=resolved.target_id,
            short_extension=resolved.short_extension,
            long_extension=resolved.long_extension,
            content=content,
            commit_message=commit_message or self._config.default_comment,
        )
        return self._pipeline.run(unit, list(self._config.steps), dict(self._config.step_settings))

    def run(self, commit_message: Optional[str] = None) -> RunResult:
        """Push every changed source file to the wiki.

        RunningStarted and RunningEnded are always emitted as a pair, also
        when the run is aborted by an exception.

        Args:
            commit_message: Default edit summary (steps may override it per unit)

        Returns:
            RunResult listing written, unchanged, excluded, skipped and failed pages

        Raises:
            NotReadyError: If not logged in or a run is already in progress
            SourceMissingError: If the source directory does not exist
            FilesystemError: If the cache cannot be persisted
        """
        source_directory = self._config.source_directory
        with self._state_lock:
            if self._state is not SchedulerState.READY:
                raise NotReadyError(self._state.value)
            if not os.path.isdir(source_directory):
                raise SourceMissingError(source_directory)
            self._state = SchedulerState.RUNNING

        try:
            self.events.emit(RunningStarted())
            result = self._run(commit_message or self._config.default_comment)
        finally:
            with self._state_lock:
                self._state = SchedulerState.READY
            self.events.emit(RunningEnded())

        return result

    def _run(self, commit_message: str) -> RunResult:
        config = self._config
        result = RunResult()

        cache = ChangeCache(config.cache_file)
        cached = cache.load()

        candidates: Dict[str, ContentUnit] = {}
        for file_path in self._file_lister(config.source_directory):
            try:
                unit = self.prepare_unit(file_path, commit_message)
            except (PathResolutionError, FilesystemError) as e:
                logger.warning(f"Skipping {file_path}: {e}")
                result.skipped.append(file_path)
                continue

            if unit.should_persist:
                candidates[unit.target_id] = unit
            else:
                result.excluded.append(unit.target_id)

        changed: List[ContentUnit] = []
        for target_id, unit in candidates.items():
            if should_write(target_id, unit.content, cached):
                changed.append(unit)
            else:
                result.unchanged.append(target_id)

        logger.info(
            f"{len(changed)} changed, {len(result.unchanged)} unchanged, "
            f"{len(result.excluded)} excluded, {len(result.skipped)} skipped"
        )

        recorded = self._dispatch(changed, result)

        if config.cache_retention is CacheRetention.MERGE:
            new_entries = {**cached, **recorded}
        else:
            new_entries = recorded
        cache.persist(new_entries)

        return result

    def _dispatch(self, units: List[ContentUnit], result: RunResult) -> Dict[str, str]:
        """Start the writes at paced offsets and wait for all of them.

        Returns:
            Fingerprints of the pages written successfully
        """
        recorded: Dict[str, str] = {}
        if not units:
            return recorded

        recorded_lock = threading.Lock()
        interval = self._config.pacing_interval
        max_workers = min(self._config.max_concurrent_writes or len(units), len(units))

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="wikipages-write") as executor:
            started = self._clock()
            futures = []
            for index, unit in enumerate(units):
                delay = started + (index + 1) * interval - self._clock()
                if delay > 0:
                    self._sleep(delay)
                futures.append(
                    (unit, executor.submit(self._write, unit, recorded, recorded_lock))
                )

            for unit, future in futures:
                if future.result():
                    result.written.append(unit.target_id)
                else:
                    result.failed.append(unit.target_id)

        return recorded

    def _write(
        self,
        unit: ContentUnit,
        recorded: Dict[str, str],
        recorded_lock: threading.Lock,
    ) -> bool:
        """Edit the page, falling back to create when it does not exist."""
        target_fingerprint = fingerprint(unit.content.rstrip())

        def reviser(revision: Revision) -> Dict[str, str]:
            if fingerprint(revision.content.rstrip()) == target_fingerprint:
                logger.info(f"{unit.target_id} already up to date on the wiki")
                return {}
            return {'summary': unit.commit_message, 'text': unit.content}

        try:
            self._client.edit(unit.target_id, reviser)
            logger.info(f"Edited {unit.target_id}")
        except Exception as e:
            if getattr(e, 'code', None) != MissingTargetError.CODE:
                error = RemoteWriteError(unit.target_id, 'edit', e)
                logger.error(str(error))
                self.events.emit(EditError(unit=unit, error=error))
                return False

            try:
                self._client.create(unit.target_id, unit.content, unit.commit_message)
                logger.info(f"Created {unit.target_id}")
            except Exception as create_error:
                error = RemoteWriteError(unit.target_id, 'create', create_error)
                logger.error(str(error))
                self.events.emit(CreateError(unit=unit, error=error))
                return False

        with recorded_lock:
            recorded[unit.target_id] = target_fingerprint
        return True

    def _report_middleware_error(self, unit: ContentUnit, error: PipelineStepError) -> None:
        self.events.emit(MiddlewareError(unit=unit, error=error))
