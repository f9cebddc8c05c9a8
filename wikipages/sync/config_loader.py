"""YAML project file loading and validation.

A project file describes where the sources live, where the fingerprint cache
goes, how folders map to namespaces and which pipeline steps to run.

Project file structure:
    credentials:
      api_url: "https://wiki.example.org/w/api.php"
      username: "SyncBot@wikipages"
      user_agent: "ExampleWiki sync"
    source_directory: "src"
    cache_file: ".wikipages/cache.json"
    namespace_mappings:
      Gadgets: "Gadget"
    pacing_interval: 10
    default_comment: "Commit via WikiPages"
    steps:
      - execute: "mysteps.lua:strip_comments"
        match_long_extension: ".lua"
        settings: "lua"
      - execute: "mysteps.checks:reject_tabs"
        match_target_id: {regex: "^Module:"}
    step_settings:
      lua: {keep_headers: true}

The password is never read from the project file; it comes from the
environment (see wikipages.wiki_client.auth).
"""

import importlib
import os
import re
import sys
from typing import Any, Dict, Optional

import yaml

from wikipages.file_mapper.errors import FilesystemError
from wikipages.pipeline.models import PipelineStep, Predicate

from .errors import ConfigError
from .models import (
    DEFAULT_COMMENT,
    DEFAULT_PACING_INTERVAL,
    CacheRetention,
    RunConfiguration,
)

DEFAULT_PROJECT_FILE = 'wikipages.yaml'


class ConfigLoader:
    """Handles project file loading and validation."""

    REQUIRED_TOP_LEVEL_FIELDS = {'source_directory', 'cache_file'}

    PREDICATE_FIELDS = ('match_short_extension', 'match_long_extension', 'match_target_id')

    CREDENTIAL_FIELDS = ('api_url', 'username', 'user_agent')

    DEFAULTS = {
        'pacing_interval': DEFAULT_PACING_INTERVAL,
        'default_comment': DEFAULT_COMMENT,
        'max_retries': 3,
        'max_concurrent_writes': None,
        'cache_retention': CacheRetention.MERGE.value,
        'legacy_extension_matching': False,
    }

    @classmethod
    def load(cls, config_path: str) -> RunConfiguration:
        """Load and parse a project file.

        Relative paths inside the file are resolved against the file's directory.

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(config_path, 'read', 'Project file not found')
        except PermissionError:
            raise FilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            raise ConfigError("Project file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Project file must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        base_dir = os.path.dirname(os.path.abspath(config_path))

        # Step modules are referenced relative to the project directory
        if base_dir not in sys.path:
            sys.path.insert(0, base_dir)

        return cls.parse(config_dict, base_dir)

    @classmethod
    def parse(cls, config_dict: Dict[str, Any], base_dir: str = '.') -> RunConfiguration:
        """Validate a configuration dictionary and build a RunConfiguration.

        Raises:
            ConfigError: If configuration is invalid
        """
        missing_fields = cls.REQUIRED_TOP_LEVEL_FIELDS - set(config_dict.keys())
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}"
            )

        source_directory = cls._resolve_path(config_dict['source_directory'], base_dir, 'source_directory')
        cache_file = cls._resolve_path(config_dict['cache_file'], base_dir, 'cache_file')
        validate_cache_path(cache_file)

        credentials = cls._parse_credentials(config_dict.get('credentials'))
        namespace_mappings = cls._parse_string_map(
            config_dict.get('namespace_mappings'), 'namespace_mappings'
        )

        steps_raw = config_dict.get('steps') or []
        if not isinstance(steps_raw, list):
            raise ConfigError("Field 'steps' must be a list", 'steps')
        steps = [cls._parse_step(step, i) for i, step in enumerate(steps_raw)]

        step_settings = config_dict.get('step_settings') or {}
        if not isinstance(step_settings, dict) or not all(
            isinstance(value, dict) for value in step_settings.values()
        ):
            raise ConfigError(
                "Field 'step_settings' must map names to dictionaries",
                'step_settings'
            )

        options = {**cls.DEFAULTS, **{
            key: config_dict[key] for key in cls.DEFAULTS if key in config_dict
        }}

        try:
            pacing_interval = float(options['pacing_interval'])
            default_comment = str(options['default_comment'])
            max_retries = int(options['max_retries'])
            max_concurrent_writes = (
                None if options['max_concurrent_writes'] is None
                else int(options['max_concurrent_writes'])
            )
            legacy_extension_matching = bool(options['legacy_extension_matching'])
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Invalid field type for optional field: {str(e)}")

        try:
            cache_retention = CacheRetention(str(options['cache_retention']).lower())
        except ValueError:
            raise ConfigError(
                f"Field 'cache_retention' must be 'merge' or 'replace', got {options['cache_retention']!r}",
                'cache_retention'
            )

        if pacing_interval < 0:
            raise ConfigError(
                f"Field 'pacing_interval' must not be negative, got {pacing_interval}",
                'pacing_interval'
            )
        if max_retries < 0:
            raise ConfigError(
                f"Field 'max_retries' must not be negative, got {max_retries}",
                'max_retries'
            )
        if max_concurrent_writes is not None and max_concurrent_writes < 1:
            raise ConfigError(
                f"Field 'max_concurrent_writes' must be at least 1, got {max_concurrent_writes}",
                'max_concurrent_writes'
            )

        return RunConfiguration(
            source_directory=source_directory,
            cache_file=cache_file,
            credentials=credentials,
            namespace_mappings=namespace_mappings,
            steps=steps,
            step_settings=step_settings,
            pacing_interval=pacing_interval,
            default_comment=default_comment,
            max_retries=max_retries,
            max_concurrent_writes=max_concurrent_writes,
            cache_retention=cache_retention,
            legacy_extension_matching=legacy_extension_matching,
        )

    @staticmethod
    def _resolve_path(value: Any, base_dir: str, config_field: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"Field '{config_field}' must be a non-empty path", config_field)
        return os.path.normpath(os.path.join(base_dir, value.strip()))

    @classmethod
    def _parse_credentials(cls, raw: Any) -> Dict[str, str]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError("Field 'credentials' must be a dictionary", 'credentials')
        if 'password' in raw:
            raise ConfigError(
                "Passwords must not be stored in the project file; set WIKIPAGES_PASSWORD",
                'credentials.password'
            )
        return {
            key: str(raw[key]) for key in cls.CREDENTIAL_FIELDS if raw.get(key)
        }

    @staticmethod
    def _parse_string_map(raw: Any, config_field: str) -> Dict[str, str]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Field '{config_field}' must be a dictionary", config_field)
        return {
            str(key): '' if value is None else str(value)
            for key, value in raw.items()
        }

    @classmethod
    def _parse_step(cls, raw: Any, index: int) -> PipelineStep:
        config_field = f'steps[{index}]'
        if not isinstance(raw, dict):
            raise ConfigError(f"Step {index} must be a dictionary", config_field)
        if 'execute' not in raw:
            raise ConfigError(f"Step {index} has no 'execute' reference", config_field)

        execute = load_callable(str(raw['execute']), f'{config_field}.execute')

        predicates: Dict[str, Optional[Predicate]] = {}
        for name in cls.PREDICATE_FIELDS:
            predicates[name] = cls._parse_predicate(raw.get(name), f'{config_field}.{name}')

        settings_index = raw.get('settings')
        return PipelineStep(
            execute=execute,
            settings_index=str(settings_index) if settings_index is not None else None,
            name=str(raw['name']) if raw.get('name') else str(raw['execute']),
            **predicates,
        )

    @staticmethod
    def _parse_predicate(raw: Any, config_field: str) -> Optional[Predicate]:
        """Plain strings are literal substring tests; ``{regex: ...}`` is a pattern."""
        if raw is None:
            return None
        if isinstance(raw, str):
            return raw
        if isinstance(raw, dict) and set(raw.keys()) == {'regex'}:
            try:
                return re.compile(str(raw['regex']))
            except re.error as e:
                raise ConfigError(f"Invalid regular expression: {e}", config_field)
        raise ConfigError(
            "Predicate must be a string or a {regex: ...} mapping", config_field
        )


def load_callable(reference: str, config_field: str = 'execute'):
    """Import ``package.module:attribute`` and return the attribute.

    Raises:
        ConfigError: If the reference is malformed, cannot be imported or is
                     not callable
    """
    module_name, sep, attribute = reference.partition(':')
    if not sep or not module_name or not attribute:
        raise ConfigError(
            f"Expected 'module:callable', got {reference!r}", config_field
        )

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import module {module_name!r}: {e}", config_field)

    for part in attribute.split('.'):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ConfigError(
                f"Module {module_name!r} has no attribute {attribute!r}", config_field
            )

    if not callable(target):
        raise ConfigError(f"{reference!r} is not callable", config_field)
    return target


def validate_cache_path(cache_file: str) -> None:
    """Reject a cache path that points at an existing directory.

    Raises:
        ConfigError: If ``cache_file`` is a directory
    """
    if os.path.isdir(cache_file):
        raise ConfigError(
            f"{cache_file} is a directory, not a valid cache file path", 'cache_file'
        )
