"""Data models for the middleware pipeline."""

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from wikipages.file_mapper.models import ContentUnit

# A predicate is a literal substring test (str) or a pattern test (compiled regex).
Predicate = Union[str, re.Pattern]

StepSettings = Optional[Mapping[str, Any]]

StepFunction = Callable[[ContentUnit, StepSettings], Optional[ContentUnit]]


@dataclass(frozen=True)
class PipelineStep:
    """One transform or validation step.

    A step runs for a unit only if every predicate it declares matches; a
    step without predicates runs for every unit. ``execute`` mutates the unit
    in place; a returned value is ignored.

    Attributes:
        execute: Callable taking (unit, settings)
        match_short_extension: Predicate over the unit's short extension
        match_long_extension: Predicate over the unit's long extension
        match_target_id: Predicate over the unit's page title
        settings_index: Key into the step settings table
        name: Label used in logs and error messages

    Example:
        >>> PipelineStep(execute=strip_comments, match_long_extension=".lua",
        ...              settings_index="lua")
    """
    execute: StepFunction
    match_short_extension: Optional[Predicate] = None
    match_long_extension: Optional[Predicate] = None
    match_target_id: Optional[Predicate] = None
    settings_index: Optional[str] = None
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return getattr(self.execute, '__qualname__', None) or repr(self.execute)


def predicate_matches(predicate: Predicate, value: str) -> bool:
    """Literal predicates test for a substring, patterns use ``search``."""
    if isinstance(predicate, re.Pattern):
        return predicate.search(value) is not None
    return predicate in value
