"""Middleware pipeline applying ordered steps to a ContentUnit.

Steps run in declaration order. A failing step is recorded on the unit, marks
it as not to be written and is reported through ``on_error``; the remaining
steps still run against the unit.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from wikipages.file_mapper.models import ContentUnit

from .errors import PipelineStepError
from .models import PipelineStep, predicate_matches

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[ContentUnit, PipelineStepError], None]


class MiddlewarePipeline:
    """Runs pipeline steps over content units.

    Attributes:
        legacy_extension_matching: Test every predicate against the long
            extension, reproducing the behaviour of earlier releases
        on_error: Called with (unit, error) for every failing step

    Example:
        >>> pipeline = MiddlewarePipeline(on_error=report)
        >>> pipeline.run(unit, steps, {"lua": {"minify": True}})
    """

    def __init__(
        self,
        legacy_extension_matching: bool = False,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.legacy_extension_matching = legacy_extension_matching
        self.on_error = on_error

    def should_run(self, step: PipelineStep, unit: ContentUnit) -> bool:
        """Check every predicate the step declares against the unit."""
        if self.legacy_extension_matching:
            checks = [
                (step.match_long_extension, unit.long_extension),
                (step.match_short_extension, unit.long_extension),
                (step.match_target_id, unit.long_extension),
            ]
        else:
            checks = [
                (step.match_long_extension, unit.long_extension),
                (step.match_short_extension, unit.short_extension),
                (step.match_target_id, unit.target_id),
            ]

        return all(
            predicate_matches(predicate, value)
            for predicate, value in checks
            if predicate is not None
        )

    def run(
        self,
        unit: ContentUnit,
        steps: Sequence[PipelineStep],
        settings: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> ContentUnit:
        """Apply ``steps`` to ``unit`` in order.

        Args:
            unit: The unit to transform (mutated in place)
            steps: Steps in declaration order
            settings: Step settings table keyed by ``settings_index``

        Returns:
            The same unit
        """
        settings = settings or {}

        for step in steps:
            if not self.should_run(step, unit):
                continue

            step_settings = settings.get(step.settings_index) if step.settings_index else None
            logger.debug(f"Running step '{step.display_name}' on {unit.target_id}")

            try:
                step.execute(unit, step_settings)
            except Exception as e:
                error = PipelineStepError(step.display_name, unit.target_id, e)
                unit.errors.append(error)
                unit.should_persist = False
                logger.warning(str(error))
                if self.on_error is not None:
                    self.on_error(unit, error)

        return unit
