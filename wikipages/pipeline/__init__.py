"""Middleware pipeline for wikipages.

Steps are declarative filters over a unit's extensions and page title that
transform or validate its content before it is written.
"""

from .errors import PipelineError, PipelineStepError
from .middleware_pipeline import MiddlewarePipeline
from .models import PipelineStep, Predicate, predicate_matches

__all__ = [
    'MiddlewarePipeline',
    'PipelineStep',
    'Predicate',
    'predicate_matches',
    'PipelineError',
    'PipelineStepError',
]
