"""Agents module - query understanding and reply generation."""

from .query_interpreter import QueryInterpreter, interpret, INTENT_RULES, DATE_RULES
from .response_composer import compose, compose_error, intercept_small_talk, extract_number_before
from .assistant import HealthAssistant

__all__ = [
    'QueryInterpreter',
    'interpret',
    'INTENT_RULES',
    'DATE_RULES',
    'compose',
    'compose_error',
    'intercept_small_talk',
    'extract_number_before',
    'HealthAssistant',
]
