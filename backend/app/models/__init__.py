"""Models module."""

from .health import (
    MetricType, DateRange, QuantitySample, HeartRateSample, SleepStageKind, SleepStage,
    HeartRateData, SleepSession, RawMetricResult, HealthSampleBatch, AuthorizationRequest,
    HealthSummary, ChatMessage,
)
from .intent import Intent, Interpretation

__all__ = [
    'MetricType', 'DateRange', 'QuantitySample', 'HeartRateSample', 'SleepStageKind',
    'SleepStage', 'HeartRateData', 'SleepSession', 'RawMetricResult', 'HealthSampleBatch',
    'AuthorizationRequest', 'HealthSummary', 'ChatMessage',
    'Intent', 'Interpretation',
]
